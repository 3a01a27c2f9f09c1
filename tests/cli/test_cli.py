import json
import logging
from pathlib import Path

import pytest

from mepgraph import cli
from mepgraph.logging import reset_logging, setup_root_logger
from tests.sample_models import BUILDING_YAML


@pytest.fixture(autouse=True)
def _restore_log_level():
    yield
    reset_logging()
    setup_root_logger()


def extract_json_from_stdout(output: str) -> str:
    """Return the first balanced JSON object printed after the report lines."""
    start = output.find('{"id":-1')
    depth = 0
    for i in range(start, len(output)):
        if output[i] == "{":
            depth += 1
        elif output[i] == "}":
            depth -= 1
            if depth == 0:
                return output[start : i + 1]
    return output[start:]


def test_run_writes_artifacts_and_report(tmp_path: Path, capsys) -> None:
    out_dir = tmp_path / "out"
    cli.main(["run", str(BUILDING_YAML), "--output", str(out_dir)])
    captured = capsys.readouterr()

    lines = captured.out.splitlines()
    lines = lines[lines.index("4 Systems") :]
    assert lines[1].startswith("4 XML files and 4 JSON graphs (")
    assert lines[1].endswith(f"generated in {out_dir} (7 total systems, 5 desirable):")
    assert lines[2] == "1001(SA 1), 1002(RA 1), 2001(Power 1), 3001(HWS 1), 4003(Orphan)"
    assert "1 systems could not be traversed" in captured.out

    assert (out_dir / "jsonData.json").exists()
    assert (out_dir / "mepSystems.json").exists()
    assert sorted(p.name for p in out_dir.glob("*.xml")) == [
        "1001.xml",
        "1002.xml",
        "2001.xml",
        "3001.xml",
    ]


def test_run_stdout_prints_root_document(tmp_path: Path, capsys) -> None:
    cli.main(["--quiet", "run", str(BUILDING_YAML), "-o", str(tmp_path), "--stdout"])
    payload = json.loads(extract_json_from_stdout(capsys.readouterr().out))
    assert payload["text"] == "Building A"
    assert len(payload["children"]) == 4


def test_run_bottom_up(tmp_path: Path) -> None:
    cli.main(["run", str(BUILDING_YAML), "-o", str(tmp_path), "--bottom-up"])
    doc = json.loads((tmp_path / "jsonData.json").read_text())
    assert doc["children"][0]["id"] == 1001


def test_run_with_store_and_workers(tmp_path: Path) -> None:
    store_path = tmp_path / "graphs.json"
    cli.main(
        [
            "run",
            str(BUILDING_YAML),
            "-o",
            str(tmp_path / "out"),
            "--workers",
            "3",
            "--store",
            str(store_path),
        ]
    )
    stored = json.loads(store_path.read_text())
    assert stored["slot"] == "MepSystemGraphJson"
    assert sorted(stored["values"]) == ["1001", "1002", "2001", "3001"]


def test_run_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["run", str(tmp_path / "missing.yaml")])
    assert exc.value.code == 1
    assert "ERROR: Model file not found" in capsys.readouterr().out


def test_run_invalid_model(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("rooms: []\n")
    with pytest.raises(SystemExit) as exc:
        cli.main(["run", str(bad)])
    assert exc.value.code == 1
    assert "ERROR: Failed to export model: ValueError: Unrecognized top-level key" in (
        capsys.readouterr().out
    )


def test_run_without_qualifying_systems(tmp_path: Path, capsys) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("title: Nothing\n")
    with pytest.raises(SystemExit):
        cli.main(["run", str(empty), "-o", str(tmp_path / "out")])
    assert "NoQualifyingSystemsError" in capsys.readouterr().out


def test_inspect_lists_systems(capsys) -> None:
    cli.main(["inspect", str(BUILDING_YAML)])
    out = capsys.readouterr().out
    assert "Model: Building A" in out
    assert "Elements: 18" in out
    assert "Connections: 15" in out
    assert "Systems: 7" in out

    rows = {line.split("|")[0].strip(): line for line in out.splitlines() if "|" in line}
    assert rows["Id"].split("|")[-1].strip() == "Export"
    assert rows["1001"].split("|")[-1].strip() == "yes"
    assert rows["4001"].split("|")[-1].strip() == "no"
    assert rows["4002"].split("|")[-1].strip() == "no"
    assert rows["4001"].split("|")[4].strip() == "-"


def test_inspect_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["inspect", str(tmp_path / "nope.yaml")])
    assert exc.value.code == 1


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 0
    assert "usage: mepgraph" in capsys.readouterr().out


def test_verbose_flag_enables_debug(tmp_path: Path) -> None:
    cli.main(["--verbose", "run", str(BUILDING_YAML), "-o", str(tmp_path)])
    assert logging.getLogger("mepgraph").level == logging.DEBUG


def test_quiet_flag(tmp_path: Path) -> None:
    cli.main(["--quiet", "inspect", str(BUILDING_YAML)])
    assert logging.getLogger("mepgraph").level == logging.WARNING


def test_format_table_empty() -> None:
    assert cli._format_table(["a"], []) == ""
