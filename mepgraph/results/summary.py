"""Run-level and per-system outcome records of an export."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from mepgraph.model.elements import MEPSystem, SystemCategory


@dataclass
class SystemResult:
    """Outcome of one system's pipeline.

    Attributes:
        system: The processed system.
        traversed: Whether a traversal tree was built.
        json: Serialized system graph, when traversed and serialized.
        xml_path: Written XML dump, when traversed.
        stored: Whether the attribute store accepted the JSON.
        error: Failure or warning message, if any.
    """

    system: MEPSystem
    traversed: bool = False
    json: Optional[str] = None
    xml_path: Optional[Path] = None
    stored: bool = False
    error: Optional[str] = None

    @property
    def exported(self) -> bool:
        return self.json is not None


@dataclass
class ExportSummary:
    """Counts and artifacts of one export run."""

    output_dir: Path
    total_systems: int = 0
    desirable_systems: int = 0
    xml_files: int = 0
    json_graphs: int = 0
    json_bytes: int = 0
    failed_traversals: int = 0
    xml_failures: int = 0
    failed_serializations: int = 0
    store_failures: int = 0
    flush_error: Optional[str] = None
    system_labels: List[str] = field(default_factory=list)
    results: List[SystemResult] = field(default_factory=list)
    identifier_lists: Dict[SystemCategory, List[int]] = field(default_factory=dict)
    artifacts: Dict[str, Path] = field(default_factory=dict)

    def record(self, result: SystemResult) -> None:
        """Fold one system's outcome into the run counts."""
        self.results.append(result)
        if not result.traversed:
            self.failed_traversals += 1
            return
        if result.xml_path is not None:
            self.xml_files += 1
        else:
            self.xml_failures += 1
        if result.json is None:
            self.failed_serializations += 1
            return
        self.json_graphs += 1
        self.json_bytes += len(result.json)
        if not result.stored:
            self.store_failures += 1

    @property
    def traversed_systems(self) -> int:
        return sum(1 for result in self.results if result.traversed)

    @property
    def title(self) -> str:
        return f"{self.xml_files} Systems"

    def main_instruction(self) -> str:
        return (
            f"{self.xml_files} XML files and {self.json_graphs} JSON graphs "
            f"({self.json_bytes} bytes) generated in {self.output_dir} "
            f"({self.total_systems} total systems, {self.desirable_systems} desirable):"
        )

    def report(self) -> str:
        """Human-readable run report."""
        lines = [self.title, self.main_instruction(), ", ".join(self.system_labels)]
        if self.failed_traversals:
            lines.append(f"{self.failed_traversals} systems could not be traversed")
        if self.xml_failures:
            lines.append(f"{self.xml_failures} XML files could not be written")
        if self.failed_serializations:
            lines.append(f"{self.failed_serializations} systems could not be serialized")
        if self.store_failures:
            lines.append(f"{self.store_failures} system graphs could not be stored")
        if self.flush_error:
            lines.append(f"Attribute store not persisted: {self.flush_error}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output_dir": str(self.output_dir),
            "total_systems": self.total_systems,
            "desirable_systems": self.desirable_systems,
            "xml_files": self.xml_files,
            "json_graphs": self.json_graphs,
            "json_bytes": self.json_bytes,
            "traversed_systems": self.traversed_systems,
            "failed_traversals": self.failed_traversals,
            "xml_failures": self.xml_failures,
            "failed_serializations": self.failed_serializations,
            "store_failures": self.store_failures,
            "flush_error": self.flush_error,
            "systems": list(self.system_labels),
            "artifacts": {name: str(path) for name, path in self.artifacts.items()},
        }
