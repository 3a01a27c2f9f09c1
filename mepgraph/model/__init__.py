"""Element model, connectivity view, and system selection."""

from mepgraph.model.connectivity import ConnectivityModel
from mepgraph.model.elements import (
    Connection,
    Element,
    ElementKind,
    ElementModel,
    ElementNotFoundError,
    MEPSystem,
    SystemCategory,
)
from mepgraph.model.selection import (
    is_desirable_system,
    is_multiple_network,
    is_well_connected,
    select_desirable_systems,
)

__all__ = [
    "Connection",
    "ConnectivityModel",
    "Element",
    "ElementKind",
    "ElementModel",
    "ElementNotFoundError",
    "MEPSystem",
    "SystemCategory",
    "is_desirable_system",
    "is_multiple_network",
    "is_well_connected",
    "select_desirable_systems",
]
