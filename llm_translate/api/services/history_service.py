"""
Translation History Service

Bounded, newest-first log of completed translations persisted as YAML.
"""
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..paths import ensure_local_file, history_path

logger = logging.getLogger(__name__)

MAX_HISTORY_ITEMS = 100


class HistoryEntry(BaseModel):
    """Fields supplied by the caller when recording a translation."""
    source_lang: str
    target_lang: str
    source_text: str
    target_text: str
    provider: str
    model: str = ""


class HistoryRecord(HistoryEntry):
    """A stored translation."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class HistoryService:
    """Service for storing and searching translation history"""

    def __init__(self, history_file: Optional[str] = None, max_items: int = MAX_HISTORY_ITEMS):
        self.history_path = Path(history_file) if history_file else history_path()
        self.max_items = max_items
        ensure_local_file(local_path=self.history_path, initial_text="records: []\n")
        self.records: List[HistoryRecord] = self._load()

    def _load(self) -> List[HistoryRecord]:
        try:
            with open(self.history_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load translation history: {e}")
            return []

        records = []
        for raw in data.get("records") or []:
            try:
                records.append(HistoryRecord(**raw))
            except (TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed history record: {e}")
        return records[: self.max_items]

    def _save(self) -> None:
        data = {"records": [record.model_dump() for record in self.records]}
        try:
            with open(self.history_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to save translation history: {e}")
            raise

    def append(self, entry: HistoryEntry) -> str:
        """
        Record a translation at the front of the history.

        The oldest records beyond ``max_items`` are evicted.

        Returns:
            New record id
        """
        record = HistoryRecord(**entry.model_dump())
        self.records.insert(0, record)
        if len(self.records) > self.max_items:
            del self.records[self.max_items:]
        self._save()
        logger.debug(f"History record added: {record.id}")
        return record.id

    def search(self, query: Optional[str] = None) -> List[HistoryRecord]:
        """Case-insensitive match on source or target text; blank query returns all."""
        if not query or not query.strip():
            return self.all()

        needle = query.lower()
        return [
            record
            for record in self.records
            if needle in record.source_text.lower() or needle in record.target_text.lower()
        ]

    def remove(self, record_id: str) -> bool:
        for index, record in enumerate(self.records):
            if record.id == record_id:
                del self.records[index]
                self._save()
                return True
        return False

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        return next((record for record in self.records if record.id == record_id), None)

    def all(self) -> List[HistoryRecord]:
        return list(self.records)

    def clear(self) -> None:
        self.records = []
        self._save()
        logger.info("Translation history cleared")
