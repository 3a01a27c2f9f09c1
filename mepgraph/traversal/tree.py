"""Traversal tree built over a system's connectivity graph.

Tree nodes come in two variants. An `ExpandedNode` is the single place where
an element's connections are followed. A `RevisitNode` marks a further
connection to an element that is already expanded elsewhere in the tree; it
is always a leaf, which is what turns loops and merges into a strict tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, List, Optional, Sequence, Tuple

from mepgraph.model.elements import ElementKind, MEPSystem


@dataclass(eq=False)
class TreeNode:
    """Common attributes of both tree node variants.

    Attributes:
        element_id (int): Id of the underlying element.
        name (str): Label emitted by serializers.
        kind (ElementKind): Kind of the underlying element.
        depth (int): Distance from the tree root (root is 0).
        parent (Optional[ExpandedNode]): Parent tree node; None for the root.
        port (Optional[str]): Port on this element through which the parent
            connects to it; None for the root.
    """

    element_id: int
    name: str
    kind: ElementKind
    depth: int = 0
    parent: Optional[ExpandedNode] = None
    port: Optional[str] = None

    is_revisit: ClassVar[bool] = False

    @property
    def children(self) -> Sequence[TreeNode]:
        return ()

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def ancestors(self) -> Iterator[ExpandedNode]:
        """Yield the parent chain up to and including the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


@dataclass(eq=False)
class ExpandedNode(TreeNode):
    """A tree node whose element's connections were followed."""

    _children: List[TreeNode] = field(default_factory=list, repr=False)

    @property
    def children(self) -> Sequence[TreeNode]:
        return self._children

    def add_child(self, child: TreeNode) -> TreeNode:
        child.parent = self
        child.depth = self.depth + 1
        self._children.append(child)
        return child


@dataclass(eq=False)
class RevisitNode(TreeNode):
    """A leaf referring to an element expanded elsewhere in the same tree."""

    is_revisit: ClassVar[bool] = True

    @property
    def referenced_id(self) -> int:
        return self.element_id


@dataclass
class TraversalTree:
    """Rooted tree produced by one traversal of one system.

    The tree is not modified after the traversal engine returns it.

    Attributes:
        system (MEPSystem): System the tree was built for.
        root (ExpandedNode): Tree node for the system's base equipment.
    """

    system: MEPSystem
    root: ExpandedNode

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Yield all tree nodes in pre-order, children in attach order."""
        stack: List[TreeNode] = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def edges(self) -> List[Tuple[TreeNode, TreeNode]]:
        """Return ``(parent, child)`` tree node pairs in pre-order."""
        return [(node.parent, node) for node in self.iter_nodes() if node.parent is not None]

    def id_edges(self) -> List[Tuple[int, int]]:
        """Return ``(parent element id, child element id)`` pairs in pre-order."""
        return [(parent.element_id, child.element_id) for parent, child in self.edges()]

    def leaves(self) -> List[TreeNode]:
        """Return leaf tree nodes, revisit leaves included, in pre-order."""
        return [node for node in self.iter_nodes() if node.is_leaf()]

    def element_ids(self) -> List[int]:
        """Return underlying element ids in pre-order, repeats included."""
        return [node.element_id for node in self.iter_nodes()]

    @property
    def expanded_count(self) -> int:
        return sum(1 for node in self.iter_nodes() if not node.is_revisit)

    @property
    def revisit_count(self) -> int:
        return sum(1 for node in self.iter_nodes() if node.is_revisit)

    @property
    def max_depth(self) -> int:
        return max(node.depth for node in self.iter_nodes())

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_nodes())
