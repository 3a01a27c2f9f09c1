"""Export workflow: traverse every qualifying system and write its graphs.

For each qualifying system the pipeline is

    traverse -> XML dump + JSON graph (+ attribute store) -> collect ids

and a failure in one system never stops the others. Once all systems are
done, the run writes two aggregate documents into the output directory:

- ``jsonData.json``: ``{"id": -1, "text": <title>, "children": [...]}``
  holding every per-system JSON graph.
- ``mepSystems.json``: the combined three-branch identifier document.

Pipelines can run on a thread pool (``ExportConfig.workers``). Each one
fills a private IdentifierCollector; results are merged in model order so
output does not depend on scheduling.
"""

from __future__ import annotations

import json
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple

from mepgraph.config import EXPORT_CONFIG, ExportConfig
from mepgraph.logging import get_logger
from mepgraph.model.connectivity import ConnectivityModel
from mepgraph.model.elements import ElementModel, MEPSystem, SystemCategory
from mepgraph.model.selection import select_desirable_systems
from mepgraph.results.identifiers import IdentifierCollector
from mepgraph.results.store import AttributeStore, AttributeStoreError, InMemoryAttributeStore
from mepgraph.results.summary import ExportSummary, SystemResult
from mepgraph.serialize.json_tree import SerializationError, dump_json, encode
from mepgraph.serialize.xml_tree import dump_xml
from mepgraph.traversal.engine import traverse

logger = get_logger(__name__)

JSON_DATA_FILENAME = "jsonData.json"
COMBINED_IDS_FILENAME = "mepSystems.json"
ROOT_DOCUMENT_ID = -1


class NoQualifyingSystemsError(RuntimeError):
    """Raised when a model has no system that qualifies for export."""


def make_output_dir(output_dir: Optional[Path] = None) -> Path:
    """Return ``output_dir`` (created if needed) or a new temporary directory."""
    if output_dir is None:
        return Path(tempfile.mkdtemp(prefix="mepgraph-"))
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def build_root_json(title: str, system_jsons: List[str]) -> str:
    """Join per-system JSON graphs under the document root node.

    Each element of ``system_jsons`` must already be a complete JSON value.
    """
    return '{"id":%d,"text":%s,"children":[%s]}' % (
        ROOT_DOCUMENT_ID,
        json.dumps(title),
        ",".join(system_jsons),
    )


def run_system_pipeline(
    connectivity: ConnectivityModel,
    system: MEPSystem,
    output_dir: Path,
    config: ExportConfig,
    store: Optional[AttributeStore] = None,
) -> Tuple[SystemResult, IdentifierCollector]:
    """Traverse, serialize, store, and collect one system.

    Returns:
        The system's outcome and a collector holding only its ids. Systems
        that cannot be traversed contribute no ids.
    """
    result = SystemResult(system=system)
    collector = IdentifierCollector()
    logger.debug("Processing system %s", system.display_name)

    tree = traverse(connectivity, system)
    if tree is None:
        result.error = "traversal failed"
        return result, collector
    result.traversed = True

    xml_path = output_dir / f"{system.id}.xml"
    try:
        result.xml_path = dump_xml(tree, xml_path, pretty_print=config.xml_pretty_print)
    except OSError as exc:
        logger.warning("Cannot write %s: %s", xml_path, exc)
        result.error = f"xml: {exc}"

    collector.collect(tree)

    try:
        result.json = dump_json(tree, bottom_up=config.store_json_graph_bottom_up)
    except SerializationError as exc:
        logger.warning("System %s not serialized: %s", system.display_name, exc)
        result.error = str(exc)
        return result, collector
    logger.debug("System %s graph: %d bytes", system.display_name, len(result.json))

    if store is not None:
        try:
            store.store(system, result.json)
            result.stored = True
        except AttributeStoreError as exc:
            logger.warning("Graph of system %s not stored: %s", system.display_name, exc)
            result.error = str(exc)

    return result, collector


def export_systems(
    model: ElementModel,
    config: Optional[ExportConfig] = None,
    output_dir: Optional[Path] = None,
    store: Optional[AttributeStore] = None,
) -> ExportSummary:
    """Export graphs of every qualifying system of ``model``.

    Args:
        model: Element model to export.
        config: Run settings; defaults to ``EXPORT_CONFIG``.
        output_dir: Artifact directory; a fresh temporary directory if None.
        store: Attribute store receiving each system's JSON graph; an
            in-memory store if None.

    Returns:
        Run summary with counts, per-system outcomes, and artifact paths.

    Raises:
        NoQualifyingSystemsError: If no system qualifies.
        AttributeStoreError: If the store cannot provide its slot.
    """
    config = config or EXPORT_CONFIG
    config.validate()

    connectivity = ConnectivityModel(model)
    desirable = select_desirable_systems(connectivity, config)
    if not desirable:
        raise NoQualifyingSystemsError(
            f"None of the {len(model.systems)} systems in '{model.title}' qualify for export."
        )

    if store is None:
        store = InMemoryAttributeStore()
    store.ensure_slot(model)

    out_dir = make_output_dir(output_dir)
    logger.info(
        "Exporting %d of %d systems to %s", len(desirable), len(model.systems), out_dir
    )

    summary = ExportSummary(
        output_dir=out_dir,
        total_systems=len(model.systems),
        desirable_systems=len(desirable),
        system_labels=sorted(s.display_name for s in desirable),
    )

    if config.workers > 1 and len(desirable) > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            futures = [
                executor.submit(
                    run_system_pipeline, connectivity, system, out_dir, config, store
                )
                for system in desirable
            ]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [
            run_system_pipeline(connectivity, system, out_dir, config, store)
            for system in desirable
        ]

    collector = IdentifierCollector()
    system_jsons: List[str] = []
    for result, local_ids in outcomes:
        summary.record(result)
        collector.merge(local_ids)
        if result.json is not None:
            system_jsons.append(result.json)

    try:
        store.flush()
    except AttributeStoreError as exc:
        logger.warning("Attribute store flush failed: %s", exc)
        summary.flush_error = str(exc)

    root_path = out_dir / JSON_DATA_FILENAME
    root_path.write_text(build_root_json(model.title, system_jsons), encoding="utf-8")
    summary.artifacts["json_data"] = root_path

    combined_path = out_dir / COMBINED_IDS_FILENAME
    combined_path.write_text(
        encode(collector.combined_document(config.combined_root_name)), encoding="utf-8"
    )
    summary.artifacts["combined_ids"] = combined_path

    for category in SystemCategory:
        summary.identifier_lists[category] = collector.ids(category)
        logger.debug("%s ids: %s", category.label, collector.to_json_array(category))

    logger.info(summary.main_instruction())
    return summary
