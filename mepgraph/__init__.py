"""MEPGraph: connectivity traversal and graph export for MEP systems.

MEPGraph walks the connectivity of mechanical, electrical, and piping
systems from their base equipment, resolves loops and merges into a strict
tree, and serializes each tree as top-down or bottom-up JSON and as XML. It
also collects deduplicated element ids per system category.

Primary API:
    ElementModel - Elements, connections, and systems of one document
    ConnectivityModel - Read-only neighbor view the traversal runs on
    traverse() - Build the TraversalTree of one system
    dump_json_top_down(), dump_json_bottom_up(), dump_xml() - Serializers
    IdentifierCollector - Per-category deduplicated element ids
    export_systems() - Run the whole export for a model

Example:
    from mepgraph import ConnectivityModel, ElementModel, dump_json_top_down, traverse

    model = ElementModel.from_yaml(yaml_text)
    connectivity = ConnectivityModel(model)
    tree = traverse(connectivity, model.get_system(1))
    print(dump_json_top_down(tree))
"""

from __future__ import annotations

from mepgraph import cli, logging
from mepgraph._version import __version__
from mepgraph.config import EXPORT_CONFIG, ExportConfig
from mepgraph.model import (
    Connection,
    ConnectivityModel,
    Element,
    ElementKind,
    ElementModel,
    ElementNotFoundError,
    MEPSystem,
    SystemCategory,
)
from mepgraph.results import (
    AttributeStore,
    AttributeStoreError,
    ExportSummary,
    IdentifierCollector,
    InMemoryAttributeStore,
    JsonFileAttributeStore,
)
from mepgraph.serialize import (
    SerializationError,
    dump_json,
    dump_json_bottom_up,
    dump_json_top_down,
    dump_xml,
)
from mepgraph.traversal import ExpandedNode, RevisitNode, TraversalTree, traverse
from mepgraph.workflow import NoQualifyingSystemsError, export_systems

__all__ = [
    # Version
    "__version__",
    # Configuration
    "ExportConfig",
    "EXPORT_CONFIG",
    # Model
    "Connection",
    "ConnectivityModel",
    "Element",
    "ElementKind",
    "ElementModel",
    "ElementNotFoundError",
    "MEPSystem",
    "SystemCategory",
    # Traversal
    "traverse",
    "TraversalTree",
    "ExpandedNode",
    "RevisitNode",
    # Serialization
    "dump_json",
    "dump_json_top_down",
    "dump_json_bottom_up",
    "dump_xml",
    "SerializationError",
    # Results
    "IdentifierCollector",
    "AttributeStore",
    "AttributeStoreError",
    "InMemoryAttributeStore",
    "JsonFileAttributeStore",
    "ExportSummary",
    # Workflow
    "export_systems",
    "NoQualifyingSystemsError",
    # Utilities
    "cli",
    "logging",
]
