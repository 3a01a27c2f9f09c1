"""JSON renderings of a TraversalTree.

Both orientations produce nested ``{"id", "name", "children"}`` mappings and
are pure functions of the tree:

- Top-down starts at the base equipment; children appear in the order the
  traversal attached them. Revisit leaves have an empty ``children`` list.
- Bottom-up inverts every tree edge. The document root is the system, and
  its children are one chain per tree leaf (pre-order), each chain node
  holding its tree parent as its only child, down to the base equipment.

Documents are built and encoded without recursion, so deep segment runs do
not hit the interpreter's recursion limit.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Tuple, Union

from mepgraph.traversal.tree import TraversalTree, TreeNode

JsonDoc = Dict[str, Any]

# Lone surrogates cannot be carried by UTF-8 or strict JSON parsers
_SURROGATES = re.compile("[\ud800-\udfff]")


class SerializationError(ValueError):
    """Raised when a tree cannot be rendered as a well-formed document."""


def _clean_name(name: object) -> str:
    return _SURROGATES.sub("", str(name))


def _node_doc(node: TreeNode) -> JsonDoc:
    element_id = node.element_id
    if isinstance(element_id, bool) or not isinstance(element_id, int):
        raise SerializationError(f"Element id {element_id!r} is not an integer.")
    return {"id": element_id, "name": _clean_name(node.name), "children": []}


def to_top_down_dict(tree: TraversalTree) -> JsonDoc:
    """Render the tree root-first."""
    root_doc = _node_doc(tree.root)
    stack: List[Tuple[TreeNode, JsonDoc]] = [(tree.root, root_doc)]
    while stack:
        node, doc = stack.pop()
        for child in node.children:
            child_doc = _node_doc(child)
            doc["children"].append(child_doc)
            stack.append((child, child_doc))
    return root_doc


def to_bottom_up_dict(tree: TraversalTree) -> JsonDoc:
    """Render the tree leaf-first, one inverted chain per leaf."""
    chains = []
    for leaf in tree.leaves():
        chain = _node_doc(leaf)
        tail = chain
        for ancestor in leaf.ancestors():
            up = _node_doc(ancestor)
            tail["children"].append(up)
            tail = up
        chains.append(chain)
    system = tree.system
    return {"id": system.id, "name": _clean_name(system.name), "children": chains}


def encode(doc: Any) -> str:
    """Encode a flat document as compact JSON.

    Tree documents go through :func:`encode_tree` instead.

    Raises:
        SerializationError: If the document holds a value JSON cannot carry.
    """
    try:
        return json.dumps(doc, separators=(",", ":"), allow_nan=False)
    except (RecursionError, ValueError, TypeError) as exc:
        raise SerializationError(f"Cannot encode document: {exc}") from exc


def encode_tree(doc: JsonDoc) -> str:
    """Encode a nested ``{"id", "name", "children"}`` document as compact JSON.

    Nodes are written from an explicit stack, so nesting depth is bounded
    by memory rather than the interpreter's recursion limit. Scalars are
    still encoded by :mod:`json`. The output is byte-identical to
    ``json.dumps(doc, separators=(",", ":"))``.

    Raises:
        SerializationError: If a node lacks one of the three keys or holds
            a value JSON cannot carry.
    """
    parts: List[str] = []
    stack: List[Union[JsonDoc, str]] = [doc]
    try:
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            parts.append(
                '{"id":%s,"name":%s,"children":['
                % (encode(item["id"]), encode(item["name"]))
            )
            stack.append("]}")
            children = item["children"]
            for i in range(len(children) - 1, -1, -1):
                stack.append(children[i])
                if i:
                    stack.append(",")
    except (KeyError, TypeError) as exc:
        raise SerializationError(f"Cannot encode tree node: {exc!r}") from exc
    return "".join(parts)


def dump_json_top_down(tree: TraversalTree) -> str:
    return encode_tree(to_top_down_dict(tree))


def dump_json_bottom_up(tree: TraversalTree) -> str:
    return encode_tree(to_bottom_up_dict(tree))


def dump_json(tree: TraversalTree, bottom_up: bool = False) -> str:
    """Render the tree in the requested orientation."""
    return dump_json_bottom_up(tree) if bottom_up else dump_json_top_down(tree)
