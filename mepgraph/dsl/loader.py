"""YAML loader + schema validation for element model documents.

Provides a single entrypoint to parse a YAML string, validate it against the
packaged JSON schema, and return a dictionary that
``ElementModel.from_dict`` can consume directly.
"""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Dict

import jsonschema
import yaml

RECOGNIZED_KEYS = {"title", "elements", "connections", "systems"}


def _load_schema() -> Dict[str, Any]:
    try:
        with (
            resources.files("mepgraph.schemas")
            .joinpath("model.json")
            .open("r", encoding="utf-8")
        ) as f:
            return json.load(f)
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "Failed to locate packaged model schema 'mepgraph/schemas/model.json'."
        ) from exc


def load_model_yaml(yaml_str: str) -> Dict[str, Any]:
    """Load and validate an element model YAML string.

    Raises:
        ValueError: If the document is not a mapping, has unrecognized
            top-level keys, or does not match the schema.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")

    # Report unknown sections before the schema's less specific message
    extra = set(data.keys()) - RECOGNIZED_KEYS
    if extra:
        raise ValueError(
            f"Unrecognized top-level key(s) in model: {', '.join(sorted(map(str, extra)))}. "
            f"Allowed keys are {sorted(RECOGNIZED_KEYS)}"
        )

    try:
        jsonschema.validate(data, _load_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ValueError(f"Invalid model document at {location}: {exc.message}") from exc

    return data
