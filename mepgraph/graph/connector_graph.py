"""Strict multi-directed graph of elements joined through connector ports.

`ConnectorGraph` extends `networkx.MultiDiGraph`. Every physical connection
is stored as two directed edges, one per side, keyed by the port label on the
edge's source element. Since a port joins at most one other port, the key is
unique per source node, which lets neighbors be listed by port in the order
the ports were declared.
"""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional, Sequence

import networkx as nx

NodeID = int


class PortLink(NamedTuple):
    """One connected port as seen from its owning element."""

    port: str
    neighbor: NodeID
    neighbor_port: str


class ConnectorGraph(nx.MultiDiGraph):
    """A multi-directed graph with strict node and port management.

    This class enforces:
      - No automatic creation of missing nodes when connecting ports.
      - No duplicate nodes (raises ValueError on duplicates).
      - Ports must be declared on their node and can be joined once.
      - Each connection is added in both directions.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        # node -> port label -> declaration index
        self._port_index: Dict[NodeID, Dict[str, int]] = {}

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeID, ports: Sequence[str] = (), **attr: Any) -> None:  # type: ignore[override]
        """Add a single node with its declared ports.

        Args:
            node_for_adding: The node to add.
            ports: Port labels in declaration order.
            **attr: Arbitrary attributes for this node.

        Raises:
            ValueError: If the node already exists.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)
        self._port_index[node_for_adding] = {p: i for i, p in enumerate(ports)}

    #
    # Port management
    #
    def connect(self, u: NodeID, u_port: str, v: NodeID, v_port: str) -> None:
        """Join ``u_port`` on ``u`` with ``v_port`` on ``v``.

        Raises:
            ValueError: If a node or port is missing, or a port is taken.
        """
        for node, port in ((u, u_port), (v, v_port)):
            if node not in self:
                raise ValueError(f"Node '{node}' does not exist.")
            if port not in self._port_index[node]:
                raise ValueError(f"Node '{node}' has no port '{port}'.")
            if self.peer(node, port) is not None:
                raise ValueError(f"Port '{port}' of node '{node}' is already connected.")
        if (u, u_port) == (v, v_port):
            raise ValueError(f"Port '{u_port}' of node '{u}' cannot join itself.")

        super().add_edge(
            u, v, key=u_port, peer_port=v_port, port_index=self._port_index[u][u_port]
        )
        super().add_edge(
            v, u, key=v_port, peer_port=u_port, port_index=self._port_index[v][v_port]
        )

    def peer(self, node: NodeID, port: str) -> Optional[PortLink]:
        """Return the link leaving ``port`` on ``node``, or None if open."""
        for _, neighbor, key, data in self.out_edges(node, keys=True, data=True):
            if key == port:
                return PortLink(port, neighbor, data["peer_port"])
        return None

    def port_links(self, node: NodeID) -> List[PortLink]:
        """List the connected ports of ``node`` in declaration order."""
        if node not in self:
            raise ValueError(f"Node '{node}' does not exist.")
        edges = sorted(
            self.out_edges(node, keys=True, data=True), key=lambda e: e[3]["port_index"]
        )
        return [PortLink(key, neighbor, data["peer_port"]) for _, neighbor, key, data in edges]

    def open_ports(self, node: NodeID) -> List[str]:
        """List declared ports of ``node`` that are not connected."""
        connected = {link.port for link in self.port_links(node)}
        return [p for p in self._port_index[node] if p not in connected]
