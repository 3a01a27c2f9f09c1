"""Export outputs: identifier lists, attribute store, run summary."""

from mepgraph.results.identifiers import IdentifierCollector
from mepgraph.results.store import (
    AttributeStore,
    AttributeStoreError,
    InMemoryAttributeStore,
    JsonFileAttributeStore,
)
from mepgraph.results.summary import ExportSummary, SystemResult

__all__ = [
    "AttributeStore",
    "AttributeStoreError",
    "ExportSummary",
    "IdentifierCollector",
    "InMemoryAttributeStore",
    "JsonFileAttributeStore",
    "SystemResult",
]
