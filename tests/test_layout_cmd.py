import json
from pathlib import Path

from click.testing import CliRunner

from radialview.cli import cli
from radialview.commands.layout_cmd import run_layout, run_levels


def test_layout_json_output(graph_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "layout.json"

    code = run_layout(graph_file, drill=("A",), fmt="json", out=out)

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["path"] == ["CENTER", "A"]
    assert payload["focus"] == "A"
    assert payload["strategy"] == "simple"
    assert set(payload["positions"]) == {"CENTER", "A", "C"}
    assert payload["collapsed"] == {"CENTER": {"total_children": 2, "hidden_children": 1}}
    assert payload["clusters"] == []


def test_layout_zoomed_out_reports_clusters(graph_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "layout.json"

    run_layout(graph_file, zoom=0.5, fmt="json", out=out)

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["zoom_percent"] == 50
    assert {m for g in payload["clusters"] for m in g["members"]} == {"CENTER", "A", "B"}


def test_layout_markdown_to_stdout(graph_file: Path, capsys) -> None:
    code = run_layout(graph_file, fmt="md")

    captured = capsys.readouterr()
    assert code == 0
    assert "# Layout: CENTER" in captured.out
    assert "| A |" in captured.out


def test_layout_rejects_unreachable_drill(graph_file: Path) -> None:
    assert run_layout(graph_file, drill=("C",), fmt="json") == 1


def test_layout_rejects_unknown_root(graph_file: Path) -> None:
    assert run_layout(graph_file, root="nope", fmt="json") == 1


def test_layout_reports_bad_config(graph_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "bad.toml"
    config.write_text('[layout]\nstrategy = "force"\n', encoding="utf-8")

    assert run_layout(graph_file, config_path=config) == 1


def test_levels_markdown(graph_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "levels.md"

    code = run_levels(graph_file, max_depth=1, out=out)

    text = out.read_text(encoding="utf-8")
    assert code == 0
    assert "| 1 | A | CENTER |" in text
    assert "Unreached: C" in text


def test_levels_json(graph_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "levels.json"

    run_levels(graph_file, fmt="json", out=out)

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["root"] == "CENTER"
    assert payload["levels"][-1] == {"key": "C", "depth": 2, "parent": "A"}
    assert payload["unreached"] == []


def test_cli_layout_command(graph_file: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["layout", str(graph_file), "--format", "json", "--viewport", "800x600"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["transform"]["x"] == 400.0


def test_cli_rejects_bad_viewport(graph_file: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["layout", str(graph_file), "--viewport", "wide"])

    assert result.exit_code != 0
    assert "WIDTHxHEIGHT" in result.output
