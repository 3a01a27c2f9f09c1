"""Connector-level graph primitives."""

from mepgraph.graph.connector_graph import ConnectorGraph, NodeID, PortLink

__all__ = ["ConnectorGraph", "NodeID", "PortLink"]
