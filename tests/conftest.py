"""Global pytest configuration.

Registers the shared fixture plugin `tests.sample_models`. The plugin is not
imported here so that pytest can apply assertion rewriting to it.
"""

from __future__ import annotations

from importlib.util import find_spec

pytest_plugins: list[str] = []
if find_spec("tests.sample_models") is not None:
    pytest_plugins = ["tests.sample_models"]
