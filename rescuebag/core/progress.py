from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

COMPLETED_ORDERS_KEY = "gou_completed_orders"


def default_storage_path() -> Path:
    home = os.environ.get("RESCUEBAG_HOME")
    base = Path(home).expanduser() if home else Path.home() / ".rescuebag"
    return base / "storage.json"


class ProgressStore:
    """String key-value storage persisted to a JSON file.

    File: ~/.rescuebag/storage.json unless ``RESCUEBAG_HOME`` or ``file_path``
    says otherwise. Writes are best effort: a failed save is logged and the
    in-memory value is kept for the rest of the session.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else default_storage_path()
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create storage directory %s: %s", self._file_path.parent, e)
        self._values = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> bool:
        """Store ``value`` under ``key``. Returns False if it could not be written to disk."""
        self._values[key] = str(value)
        return self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()

    def reset(self) -> None:
        """Clear every stored value."""
        self._values = {}
        self._save()

    def save(self) -> bool:
        """Persist current state to disk (e.g. on app exit)."""
        return self._save()

    def _load(self) -> Dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load storage from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring storage in %s: expected a JSON object", self._file_path)
            return {}
        return {str(k): str(v) for k, v in payload.items() if v is not None}

    def _save(self) -> bool:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save storage to %s: %s", self._file_path, e)
            return False
        return True


def read_completed_orders(store: ProgressStore) -> int:
    """Stored counter, or 0 when it is missing, non-numeric or negative."""
    raw = store.get(COMPLETED_ORDERS_KEY)
    if raw is None:
        return 0
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-numeric %s value %r", COMPLETED_ORDERS_KEY, raw)
        return 0
    return max(0, value)
