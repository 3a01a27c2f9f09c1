"""Tree serializers: top-down and bottom-up JSON, and XML."""

from mepgraph.serialize.json_tree import (
    SerializationError,
    dump_json,
    dump_json_bottom_up,
    dump_json_top_down,
    encode,
    encode_tree,
    to_bottom_up_dict,
    to_top_down_dict,
)
from mepgraph.serialize.xml_tree import dump_xml, dump_xml_string, to_xml_element

__all__ = [
    "SerializationError",
    "dump_json",
    "dump_json_bottom_up",
    "dump_json_top_down",
    "dump_xml",
    "dump_xml_string",
    "encode",
    "encode_tree",
    "to_bottom_up_dict",
    "to_top_down_dict",
    "to_xml_element",
]
