"""
Flat-file subscription store.

The whole list is kept as one JSON array: every lookup reads the file in
full and every append rewrites it. There is no index, no uniqueness check
and no locking; concurrent writers race and the last write wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ordertracker.models.subscription import Subscription
from ordertracker.store.base import SubscriptionStore

logger = logging.getLogger(__name__)


class FileSubscriptionStore(SubscriptionStore):
    """Subscription list persisted to a JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> list[dict]:
        if not self.path.exists():
            return []

        text = self.path.read_text(encoding="utf-8").strip()
        if not text:
            return []

        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError(f"Subscription file is not a JSON array: {self.path}")
        return data

    def _write(self, records: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(records, indent=2), encoding="utf-8")

    def add(self, subscription: Subscription) -> Subscription:
        records = self._read()
        records.append(subscription.model_dump(mode="json", by_alias=True))
        self._write(records)

        logger.info(
            "Subscription added: order=%s total=%d",
            subscription.order_id,
            len(records),
        )
        return subscription

    def all(self) -> list[Subscription]:
        return [Subscription.model_validate(r) for r in self._read()]
