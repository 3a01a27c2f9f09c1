"""Connectivity graph to tree resolution."""

from mepgraph.traversal.engine import traverse
from mepgraph.traversal.tree import ExpandedNode, RevisitNode, TraversalTree, TreeNode

__all__ = ["ExpandedNode", "RevisitNode", "TraversalTree", "TreeNode", "traverse"]
