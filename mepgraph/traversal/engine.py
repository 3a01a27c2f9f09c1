"""Breadth-first traversal of a system into a TraversalTree.

The walk starts at the system's base equipment and is bounded to the
system's members. Each element is expanded at most once:

- A neighbor seen for the first time becomes an ``ExpandedNode`` child and
  joins the back of the FIFO frontier.
- A neighbor that is already in the tree becomes a ``RevisitNode`` leaf and
  is not followed further.
- The port an element was reached through is not followed back to its
  parent, so a plain run of segments yields a plain chain. Every other
  connection of an expanded element shows up among its children.

Children are attached in connector declaration order, which together with
the FIFO frontier makes the resulting tree a pure function of the model.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional

from mepgraph.logging import get_logger
from mepgraph.model.connectivity import ConnectivityModel
from mepgraph.model.elements import ElementNotFoundError, MEPSystem
from mepgraph.traversal.tree import ExpandedNode, RevisitNode, TraversalTree

logger = get_logger(__name__)


def traverse(
    connectivity: ConnectivityModel, system: MEPSystem
) -> Optional[TraversalTree]:
    """Build the traversal tree of one system.

    Args:
        connectivity: Read-only connectivity view of the model.
        system: System to walk, rooted at its base equipment.

    Returns:
        The tree, or None when the system has no resolvable base equipment,
        no members, or references an element missing from the model.
    """
    root_id = connectivity.root_of(system)
    if root_id is None:
        logger.warning(
            "System %s has no resolvable base equipment; skipping",
            system.display_name,
        )
        return None

    members = connectivity.members_of(system)
    if not members:
        logger.warning("System %s has no member elements; skipping", system.display_name)
        return None

    root_element = connectivity.element(root_id)
    root = ExpandedNode(root_id, root_element.label, root_element.kind)
    visited = {root_id}
    frontier: Deque[ExpandedNode] = deque([root])

    try:
        while frontier:
            node = frontier.popleft()
            for link in connectivity.neighbors(node.element_id, members):
                if node.parent is not None and link.port == node.port:
                    continue
                element = connectivity.element(link.neighbor)
                if link.neighbor in visited:
                    node.add_child(
                        RevisitNode(
                            element.id, element.label, element.kind, port=link.neighbor_port
                        )
                    )
                    continue
                visited.add(link.neighbor)
                child = ExpandedNode(
                    element.id, element.label, element.kind, port=link.neighbor_port
                )
                node.add_child(child)
                frontier.append(child)
    except ElementNotFoundError as exc:
        logger.error("Traversal of system %s failed: %s", system.display_name, exc)
        return None

    tree = TraversalTree(system=system, root=root)
    logger.debug(
        "Traversed system %s: %d elements, %d revisits, depth %d",
        system.display_name,
        len(visited),
        tree.revisit_count,
        tree.max_depth,
    )
    return tree
