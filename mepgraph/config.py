"""Configuration for MEP system graph export."""

from dataclasses import dataclass


@dataclass
class ExportConfig:
    """Settings that apply to a whole export run."""

    # Per-system JSON orientation; the choice is global for one run.
    store_json_graph_bottom_up: bool = False

    # Systems with fewer member elements are not exported.
    min_system_elements: int = 2

    # Name the host model gives to systems nothing is assigned to.
    unassigned_name: str = "unassigned"

    # Parallel system pipelines; 1 runs them in the calling thread.
    workers: int = 1

    # Root label of the combined per-category identifier document.
    combined_root_name: str = "MEP Systems"

    xml_pretty_print: bool = True

    def validate(self) -> None:
        """Raise ValueError for settings that cannot drive a run."""
        if self.min_system_elements < 1:
            raise ValueError("min_system_elements must be at least 1")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")


# Global configuration instance
EXPORT_CONFIG = ExportConfig()
