from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration keys.
2. Options that were not given stay out of the overrides.
3. Format choices are enforced by the parser.
"""

import pytest

from folderviz.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_value_flags_mapping() -> None:
    args = parse_args([
        "--root-name", "acme",
        "--template", "Python package",
        "-f", "mermaid",
        "--export-dir", "/tmp/out",
    ])

    overrides = args_to_overrides(args)

    assert overrides == {
        "root_name": "acme",
        "template": "Python package",
        "output_format": "mermaid",
        "export_dir": "/tmp/out",
    }


def test_cli_debug_sets_log_level() -> None:
    assert args_to_overrides(parse_args(["--debug"])) == {"log_level": "DEBUG"}


def test_cli_path_arguments() -> None:
    args = parse_args(["-i", "in.json", "--ops", "ops.json", "-o", "out.txt", "--search", "util"])

    assert args.input_path == "in.json"
    assert args.ops_path == "ops.json"
    assert args.output_path == "out.txt"
    assert args.search == "util"
    # Paths are run inputs, not persisted configuration.
    assert args_to_overrides(args) == {}


def test_cli_defaults_produce_no_overrides() -> None:
    args = parse_args([])

    assert args_to_overrides(args) == {}
    assert args.use_defaults is False
    assert args.dump_config is False
    assert args.list_templates is False
    assert args.save_config is False


def test_cli_rejects_unknown_format() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--format", "yaml"])
