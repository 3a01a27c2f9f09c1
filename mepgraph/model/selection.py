"""Selection of systems that qualify for graph export."""

from __future__ import annotations

from typing import List, Optional

from mepgraph.config import EXPORT_CONFIG, ExportConfig
from mepgraph.logging import get_logger
from mepgraph.model.connectivity import ConnectivityModel
from mepgraph.model.elements import MEPSystem, SystemCategory

logger = get_logger(__name__)


def is_well_connected(system: MEPSystem, connectivity: ConnectivityModel) -> bool:
    """Return the system's well-connected flag, deriving it when unset.

    A derived system is well connected when every member is reachable from
    the base equipment without leaving the system and no member has an open
    connector.
    """
    if system.well_connected is not None:
        return bool(system.well_connected)
    root = connectivity.root_of(system)
    members = connectivity.members_of(system)
    if root is None or not members:
        return False
    if connectivity.reachable_from(root, members) != members:
        return False
    return all(not connectivity.open_ports(eid) for eid in members)


def is_multiple_network(system: MEPSystem, connectivity: ConnectivityModel) -> bool:
    """Return the system's multiple-network flag, deriving it when unset.

    A derived system qualifies when at least one member branches, i.e. has
    three or more connections to other members.
    """
    if system.multiple_network is not None:
        return bool(system.multiple_network)
    members = connectivity.members_of(system)
    return any(len(connectivity.neighbors(eid, members)) >= 3 for eid in members)


def is_desirable_system(
    system: MEPSystem,
    connectivity: ConnectivityModel,
    config: Optional[ExportConfig] = None,
) -> bool:
    """Return True if the system should be included in the exported graphs."""
    config = config or EXPORT_CONFIG
    if system.size < config.min_system_elements:
        return False
    if system.name == config.unassigned_name:
        return False
    if system.category in (SystemCategory.MECHANICAL, SystemCategory.PIPING):
        return is_well_connected(system, connectivity)
    return is_multiple_network(system, connectivity)


def select_desirable_systems(
    connectivity: ConnectivityModel, config: Optional[ExportConfig] = None
) -> List[MEPSystem]:
    """Return qualifying systems in model order."""
    selected = []
    for system in connectivity.model.systems.values():
        if is_desirable_system(system, connectivity, config):
            selected.append(system)
        else:
            logger.debug("System %s does not qualify for export", system.display_name)
    return selected
