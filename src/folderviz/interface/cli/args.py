from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from folderviz.domain.constants import OUTPUT_FORMATS

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the FolderViz CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="folderviz",
        description="Build, reshape and export folder/file structures.",
    )

    # --- Tree Source ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Import a structure from a flat or nested JSON file.",
    )
    p.add_argument(
        "--template",
        default=None,
        help="Start from a named starter template (see --list-templates).",
    )
    p.add_argument(
        "--root-name",
        dest="root_name",
        default=None,
        help="Name of the root folder (renames an imported root as well).",
    )
    p.add_argument(
        "--ops",
        dest="ops_path",
        default=None,
        help="JSON file with a list of operations to apply in order.",
    )

    # --- Output ---
    p.add_argument(
        "-f", "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format written to stdout or --output.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Write the rendered output to this file instead of stdout.",
    )
    p.add_argument(
        "--export-dir",
        dest="export_dir",
        default=None,
        help="Write tree.txt, structure.md, structure.json and structure.mmd here.",
    )
    p.add_argument(
        "--search",
        default=None,
        help="Print the paths of nodes whose names contain this text.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--list-templates",
        action="store_true",
        help="List the available starter templates and exit.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration for later runs.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options that were actually given appear in the result.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.root_name is not None:
        overrides["root_name"] = args.root_name
    if args.template is not None:
        overrides["template"] = args.template
    if args.output_format is not None:
        overrides["output_format"] = args.output_format
    if args.export_dir is not None:
        overrides["export_dir"] = args.export_dir
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
