"""
HTML to text conversion shared by email ingest and outgoing mail.
"""

import re

from bs4 import BeautifulSoup

# Cheap check before paying for a parse
HTML_TAG_PATTERN = re.compile(r"<\s*(html|body|div|p|br|table|span|a)\b", re.IGNORECASE)


def looks_like_html(text: str) -> bool:
    return bool(HTML_TAG_PATTERN.search(text or ""))


def html_to_text(html: str) -> str:
    """
    Extract readable text from HTML.

    Scripts, styles and page chrome are dropped; block text is joined
    with newlines.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(["script", "style", "nav", "footer", "header", "head"]):
        tag.decompose()

    return soup.get_text(separator="\n", strip=True)
