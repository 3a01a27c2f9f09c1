"""Persisted per-system attribute slot for serialized system graphs.

The host application stores each system's JSON graph in a shared attribute
on the system itself. `AttributeStore` is the boundary the export workflow
writes through; two implementations are provided:

- ``InMemoryAttributeStore`` keeps values in a dict keyed by system id.
- ``JsonFileAttributeStore`` additionally writes all values to one JSON
  mapping file on :meth:`flush`.

Stores must create their slot in :meth:`AttributeStore.ensure_slot` before
any value is written, and signal rejected writes with AttributeStoreError.
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from mepgraph.model.elements import ElementModel, MEPSystem

DEFAULT_SLOT_NAME = "MepSystemGraphJson"


class AttributeStoreError(RuntimeError):
    """Raised when a store rejects a write."""


class AttributeStore(ABC):
    """Per-system string attribute storage."""

    slot_name: str = DEFAULT_SLOT_NAME

    @abstractmethod
    def has_slot(self) -> bool:
        """Return True if the storage slot exists."""

    @abstractmethod
    def create_slot(self, model: ElementModel) -> None:
        """Create the storage slot for ``model``."""

    @abstractmethod
    def store(self, system: MEPSystem, value: str) -> None:
        """Store ``value`` against ``system``.

        Raises:
            AttributeStoreError: If the write is rejected.
        """

    def ensure_slot(self, model: ElementModel) -> None:
        """Create the slot if missing.

        Raises:
            AttributeStoreError: If the slot still does not exist afterwards.
        """
        if self.has_slot():
            return
        self.create_slot(model)
        if not self.has_slot():
            raise AttributeStoreError(
                f"Error creating the '{self.slot_name}' storage slot."
            )

    def flush(self) -> None:
        """Persist buffered values, if the store buffers any."""


class InMemoryAttributeStore(AttributeStore):
    """Attribute values held in memory, keyed by system id."""

    def __init__(self, slot_name: str = DEFAULT_SLOT_NAME) -> None:
        self.slot_name = slot_name
        self.values: Dict[int, str] = {}
        self._slot: Optional[str] = None
        self._lock = threading.Lock()

    def has_slot(self) -> bool:
        return self._slot is not None

    def create_slot(self, model: ElementModel) -> None:
        self._slot = self.slot_name

    def store(self, system: MEPSystem, value: str) -> None:
        if not self.has_slot():
            raise AttributeStoreError(
                f"Slot '{self.slot_name}' does not exist; cannot store system {system.display_name}."
            )
        with self._lock:
            self.values[system.id] = value

    def get(self, system_id: int) -> Optional[str]:
        return self.values.get(system_id)


class JsonFileAttributeStore(InMemoryAttributeStore):
    """In-memory store written out as ``{"<system id>": "<value>"}`` JSON."""

    def __init__(self, path: Path, slot_name: str = DEFAULT_SLOT_NAME) -> None:
        super().__init__(slot_name=slot_name)
        self.path = Path(path)

    def flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "slot": self.slot_name,
            "values": {str(k): v for k, v in self.values.items()},
        }
        try:
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise AttributeStoreError(f"Cannot write {self.path}: {exc}") from exc
