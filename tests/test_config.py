"""Test the configuration module functionality."""

from dataclasses import replace

import pytest

from mepgraph.config import EXPORT_CONFIG, ExportConfig


def test_export_config_defaults():
    config = ExportConfig()

    assert config.store_json_graph_bottom_up is False
    assert config.min_system_elements == 2
    assert config.unassigned_name == "unassigned"
    assert config.workers == 1
    assert config.combined_root_name == "MEP Systems"
    assert config.xml_pretty_print is True


def test_global_config_instance():
    assert EXPORT_CONFIG == ExportConfig()
    EXPORT_CONFIG.validate()


def test_replace_creates_independent_copy():
    custom = replace(EXPORT_CONFIG, store_json_graph_bottom_up=True, workers=8)
    assert custom.workers == 8
    assert custom.store_json_graph_bottom_up is True
    assert EXPORT_CONFIG.workers == 1


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"min_system_elements": 0}, "min_system_elements"),
        ({"workers": 0}, "workers"),
    ],
)
def test_validate_rejects_bad_settings(kwargs, message):
    with pytest.raises(ValueError, match=message):
        ExportConfig(**kwargs).validate()
