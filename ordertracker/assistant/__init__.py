"""
Chat assistant.

- intents: ordered regex rules that answer without AI
- assistant: AI-first answering with the rules as fallback
"""

from ordertracker.assistant.assistant import ChatAssistant
from ordertracker.assistant.intents import DEFAULT_RULES, IntentRule, classify
from ordertracker.assistant.prompts import ASSISTANT_INSTRUCTION

__all__ = [
    "ASSISTANT_INSTRUCTION",
    "ChatAssistant",
    "DEFAULT_RULES",
    "IntentRule",
    "classify",
]
