"""XML dump of a TraversalTree for archival and manual inspection."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Tuple

from lxml import etree

from mepgraph.traversal.tree import TraversalTree, TreeNode

# Characters XML 1.0 does not allow in attribute values
_XML_INVALID = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _xml_safe(value: object) -> str:
    return _XML_INVALID.sub("", str(value))


def _element_attrs(node: TreeNode) -> dict:
    attrs = {
        "id": str(node.element_id),
        "name": _xml_safe(node.name),
        "category": node.kind.value,
        "depth": str(node.depth),
        "revisit": "true" if node.is_revisit else "false",
    }
    if node.port is not None:
        attrs["port"] = _xml_safe(node.port)
    return attrs


def to_xml_element(tree: TraversalTree) -> etree._Element:
    """Build the XML element tree, one ``Element`` per tree node.

    Nesting follows the top-down order.
    """
    system = tree.system
    root_el = etree.Element(
        "TraversalTree",
        attrib={
            "system-id": str(system.id),
            "system-name": _xml_safe(system.name),
            "category": system.category.value,
        },
    )
    stack: List[Tuple[TreeNode, etree._Element]] = [(tree.root, root_el)]
    while stack:
        node, parent_el = stack.pop()
        node_el = etree.SubElement(parent_el, "Element", attrib=_element_attrs(node))
        stack.extend((child, node_el) for child in reversed(node.children))
    return root_el


def dump_xml_string(tree: TraversalTree, pretty_print: bool = True) -> bytes:
    return etree.tostring(
        to_xml_element(tree),
        encoding="UTF-8",
        xml_declaration=True,
        pretty_print=pretty_print,
    )


def dump_xml(tree: TraversalTree, path: Path, pretty_print: bool = True) -> Path:
    """Write the XML dump to ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dump_xml_string(tree, pretty_print=pretty_print))
    return path
