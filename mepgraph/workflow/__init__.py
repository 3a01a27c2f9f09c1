"""Run orchestration."""

from mepgraph.workflow.export import (
    NoQualifyingSystemsError,
    build_root_json,
    export_systems,
    run_system_pipeline,
)

__all__ = [
    "NoQualifyingSystemsError",
    "build_root_json",
    "export_systems",
    "run_system_pipeline",
]
