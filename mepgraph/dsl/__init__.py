"""Model document parsing."""

from mepgraph.dsl.loader import load_model_yaml

__all__ = ["load_model_yaml"]
