"""
Durable storage ports for the cart.

The cart persists its full snapshot after every mutation. Storage is
injected so the same cart logic runs against a file on a device, an
in-memory store in tests, or anything else that can hold a JSON list.
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class CartStorage(ABC):

    @abstractmethod
    def load(self) -> List[Dict[str, Any]]:
        """Return the stored snapshot, or an empty list."""

    @abstractmethod
    def save(self, snapshot: List[Dict[str, Any]]) -> None:
        """Replace the stored snapshot."""


class MemoryCartStorage(CartStorage):
    def __init__(self, snapshot=None):
        self.snapshot = list(snapshot or [])
        self.save_count = 0

    def load(self):
        return json.loads(json.dumps(self.snapshot))

    def save(self, snapshot):
        self.snapshot = json.loads(json.dumps(snapshot))
        self.save_count += 1


class JsonFileCartStorage(CartStorage):
    """
    Cart snapshot stored as a JSON file.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash never leaves a half-written cart. An unreadable file
    is discarded.
    """

    def __init__(self, path):
        self.path = Path(path)

    def load(self):
        if not self.path.exists():
            return []
        try:
            with self.path.open('r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable cart file {self.path}: {e}")
            self.path.unlink(missing_ok=True)
            return []
        if not isinstance(data, list):
            logger.warning(f"Discarding malformed cart file {self.path}")
            self.path.unlink(missing_ok=True)
            return []
        return data

    def save(self, snapshot):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix='.cart-', suffix='.json')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(snapshot, fh)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
