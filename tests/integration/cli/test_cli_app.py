from __future__ import annotations

"""
Integration tests for the CLI controller.

Runs `main(argv)` in-process against temporary files and checks stdout,
stderr, written artifacts and exit codes.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from folderviz.domain.constants import TEMPLATES
from folderviz.infra.logging import reset_logging
from folderviz.interface.cli.app import (
    EXIT_INPUT_ERROR,
    EXIT_OK,
    main,
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, capsys):
    """Keep user data and logging state out of the real environment.

    Depends on capsys so the log listener stops before capture ends.
    """
    user_dir = tmp_path / "userdata"
    user_dir.mkdir()
    with patch("folderviz.domain.config.get_user_data_dir", return_value=str(user_dir)):
        reset_logging()
        yield user_dir
        reset_logging()


def _write_json(path: Path, payload) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_default_run_prints_lone_root(capsys) -> None:
    assert main(["--use-defaults"]) == EXIT_OK
    assert capsys.readouterr().out == "PROJECT\n"


def test_root_name_override(capsys) -> None:
    assert main(["--use-defaults", "--root-name", "acme", "-f", "markdown"]) == EXIT_OK
    assert capsys.readouterr().out == "- **acme**\n"


def test_ops_script_and_formats(tmp_path: Path, capsys) -> None:
    ops = _write_json(tmp_path / "ops.json", [
        {"op": "add", "kind": "folder", "name": "src"},
        {"op": "add", "kind": "file", "name": "index.js", "parent_path": "src"},
    ])

    assert main(["--use-defaults", "--ops", ops]) == EXIT_OK
    assert capsys.readouterr().out == "PROJECT\n└── src\n    └── index.js\n"

    assert main(["--use-defaults", "--ops", ops, "-f", "nested"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {
        "name": "PROJECT",
        "kind": "folder",
        "children": [
            {"name": "src", "kind": "folder", "children": [{"name": "index.js", "kind": "file"}]},
        ],
    }


def test_import_flat_file_and_write_output(tmp_path: Path, sample_store, capsys) -> None:
    from folderviz.core.serialization.flat import to_flat

    source = _write_json(tmp_path / "tree.json", to_flat(sample_store))
    out = tmp_path / "out" / "tree.mmd"

    assert main(["--use-defaults", "-i", source, "-f", "mermaid", "-o", str(out)]) == EXIT_OK
    assert capsys.readouterr().out == ""
    text = out.read_text(encoding="utf-8")
    assert text.startswith("flowchart TD\n")
    assert text.endswith("  n_root --> n_readme\n")


def test_import_renames_root_when_asked(tmp_path: Path, capsys) -> None:
    source = _write_json(tmp_path / "tree.json", {"name": "orig", "children": []})
    assert main(["--use-defaults", "-i", source, "--root-name", "renamed"]) == EXIT_OK
    assert capsys.readouterr().out == "renamed\n"


def test_template_and_export_dir(tmp_path: Path, capsys) -> None:
    export_dir = tmp_path / "exports"
    template = next(iter(TEMPLATES))

    code = main(["--use-defaults", "--template", template, "--export-dir", str(export_dir)])

    assert code == EXIT_OK
    for name in ("tree.txt", "structure.md", "structure.json", "structure.mmd"):
        assert (export_dir / name).is_file()
    bundle = (export_dir / "structure.md").read_text(encoding="utf-8")
    assert bundle.startswith("# Folder Structure")
    assert "tree:" in capsys.readouterr().err


def test_search_prints_paths(tmp_path: Path, sample_store, capsys) -> None:
    from folderviz.core.serialization.flat import to_flat

    source = _write_json(tmp_path / "tree.json", to_flat(sample_store))
    assert main(["--use-defaults", "-i", source, "--search", ".md"]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["docs/guide.md", "README.md"]


def test_list_templates(capsys) -> None:
    assert main(["--use-defaults", "--list-templates"]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == list(TEMPLATES)


def test_dump_config(capsys) -> None:
    assert main(["--use-defaults", "--dump-config", "-f", "json"]) == EXIT_OK
    dumped = json.loads(capsys.readouterr().out)
    assert dumped["output_format"] == "json"
    assert dumped["root_name"] == "PROJECT"


def test_save_config_persists_overrides(isolated_environment: Path, capsys) -> None:
    assert main(["--use-defaults", "--root-name", "kept", "--save-config"]) == EXIT_OK
    capsys.readouterr()

    stored = json.loads((isolated_environment / "config.json").read_text(encoding="utf-8"))
    assert stored["last_session"]["root_name"] == "kept"

    assert main([]) == EXIT_OK
    assert capsys.readouterr().out == "kept\n"


@pytest.mark.parametrize(
    "payload",
    ["{broken", json.dumps({"name": "a.txt", "kind": "file"}), json.dumps({"root_id": "r", "nodes": {}})],
)
def test_bad_input_exits_with_input_error(tmp_path: Path, payload: str, capsys) -> None:
    source = tmp_path / "bad.json"
    source.write_text(payload, encoding="utf-8")

    assert main(["--use-defaults", "-i", str(source)]) == EXIT_INPUT_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "ERROR:" in captured.err


def test_missing_input_and_unknown_template(tmp_path: Path, capsys) -> None:
    assert main(["--use-defaults", "-i", str(tmp_path / "nope.json")]) == EXIT_INPUT_ERROR
    assert main(["--use-defaults", "--template", "Nope"]) == EXIT_INPUT_ERROR
    assert "Unknown template 'Nope'." in capsys.readouterr().err


def test_malformed_ops_script(tmp_path: Path, capsys) -> None:
    ops = _write_json(tmp_path / "ops.json", {"op": "add"})
    assert main(["--use-defaults", "--ops", ops]) == EXIT_INPUT_ERROR
