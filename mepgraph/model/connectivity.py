"""Read-only connectivity view over an ElementModel.

`ConnectivityModel` is what the traversal engine sees: element identity and
kind, plus the neighbors reachable through each connected port. Neighbor
order follows connector declaration order and does not change between calls,
which keeps traversal output deterministic.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional, Set

import networkx as nx

from mepgraph.graph.connector_graph import ConnectorGraph, NodeID, PortLink
from mepgraph.model.elements import (
    Element,
    ElementKind,
    ElementModel,
    ElementNotFoundError,
    MEPSystem,
)


class ConnectivityModel:
    """Neighbor enumeration for the elements of one model.

    Attributes:
        model (ElementModel): The underlying document; never mutated here.
        graph (ConnectorGraph): Port-keyed connection graph built once.
    """

    def __init__(self, model: ElementModel) -> None:
        self.model = model
        self.graph = ConnectorGraph(title=model.title)
        for element in model.elements.values():
            self.graph.add_node(element.id, ports=element.connectors, kind=element.kind)
        for conn in model.connections:
            self.graph.connect(conn.source, conn.source_port, conn.target, conn.target_port)

    def element(self, element_id: NodeID) -> Element:
        return self.model.get_element(element_id)

    def category(self, element_id: NodeID) -> ElementKind:
        """Return the kind of an element.

        Raises:
            ElementNotFoundError: If the element is unknown.
        """
        return self.element(element_id).kind

    def neighbors(
        self, element_id: NodeID, members: Optional[AbstractSet[NodeID]] = None
    ) -> List[PortLink]:
        """List connected ports of an element in declaration order.

        Args:
            element_id: Element to enumerate.
            members: When given, drop links to elements outside this set.

        Raises:
            ElementNotFoundError: If the element is unknown.
        """
        if element_id not in self.graph:
            raise ElementNotFoundError(element_id)
        links = self.graph.port_links(element_id)
        if members is None:
            return links
        return [link for link in links if link.neighbor in members]

    def root_of(self, system: MEPSystem) -> Optional[NodeID]:
        """Return the base equipment id of a system, or None if unresolvable."""
        base = system.base_equipment
        if base is None or base not in self.graph:
            return None
        return base

    def members_of(self, system: MEPSystem) -> Set[NodeID]:
        """Element ids a traversal of ``system`` may visit.

        The base equipment counts as a member even when the host model does
        not list it among the system elements.
        """
        members = set(system.elements)
        root = self.root_of(system)
        if members and root is not None:
            members.add(root)
        return members

    def system_graph(self, system: MEPSystem) -> nx.MultiDiGraph:
        """Read-only networkx view of the connections between members of ``system``."""
        return self.graph.subgraph(self.members_of(system))

    def reachable_from(
        self, element_id: NodeID, members: Optional[Iterable[NodeID]] = None
    ) -> Set[NodeID]:
        """Element ids connected to ``element_id``, itself included."""
        if element_id not in self.graph:
            raise ElementNotFoundError(element_id)
        graph = self.graph if members is None else self.graph.subgraph(members)
        if element_id not in graph:
            return set()
        return {element_id} | nx.descendants(graph, element_id)

    def open_ports(self, element_id: NodeID) -> List[str]:
        if element_id not in self.graph:
            raise ElementNotFoundError(element_id)
        return self.graph.open_ports(element_id)
