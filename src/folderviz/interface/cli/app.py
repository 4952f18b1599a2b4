from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates a headless run: logging bootstrap, configuration resolution
(defaults, saved state, CLI overrides), building the tree from a template
or import, applying an operation script, and rendering/exporting the
result.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from folderviz.core.engine import mutator
from folderviz.core.engine.queries import matches, path_of
from folderviz.core.serialization.flat import load_payload, parse_payload
from folderviz.core.serialization.nested import from_nested
from folderviz.core.services import exporter
from folderviz.core.services.operations import apply_operations
from folderviz.core.services.validator import validate_config
from folderviz.domain.config import get_default_config, load_config, save_config
from folderviz.domain.constants import TEMPLATES
from folderviz.domain.errors import FormatError
from folderviz.domain.tree_models import NodeStore, default_state
from folderviz.infra.fs import read_text, write_text
from folderviz.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from folderviz.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Configuration hierarchy (Default vs Persistent state) + overrides
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap (console on stderr, optional rotating file)
    log_file = get_default_log_path() if conf["log_to_file"] else None
    configure_logging(LoggingConfig(level=conf["log_level"], console=True, log_file=log_file))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.list_templates:
        for name in TEMPLATES:
            print(name)
        return EXIT_OK

    if args.save_config:
        save_config(conf)

    # 4. Tree construction phase
    try:
        store = _build_store(conf, args.input_path, args.root_name)
        if args.ops_path:
            store = apply_operations(
                store, parse_payload(read_text(args.ops_path)), id_length=conf["id_length"]
            )
    except (FormatError, KeyError) as e:
        logger.error(f"Input rejected: {e}")
        print(f"ERROR: {_describe(e)}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    # 5. Output rendering phase
    try:
        if args.search is not None:
            _print_matches(store, args.search)
        else:
            _emit(store, conf["output_format"], args.output_path)

        if args.export_dir is not None:
            written = exporter.export_all(store, conf["export_dir"])
            for fmt, path in written.items():
                print(f"  - {fmt}: {path}", file=sys.stderr)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of known override keys into the base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in base and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# TREE CONSTRUCTION
# -----------------------------------------------------------------------------

def _build_store(conf: Dict[str, Any], input_path: Optional[str], root_name: Optional[str]) -> NodeStore:
    """Import, template or empty tree, in that order of precedence."""
    if input_path:
        logger.info(f"Importing structure from: {input_path}")
        store = load_payload(parse_payload(read_text(input_path)), id_length=conf["id_length"])
    elif conf["template"]:
        if conf["template"] not in TEMPLATES:
            raise KeyError(f"Unknown template '{conf['template']}'.")
        store = from_nested(TEMPLATES[conf["template"]], id_length=conf["id_length"])
    else:
        return default_state(conf["root_name"])

    if root_name:
        store = mutator.rename(store, store.root_id, root_name)
    return store


def _describe(error: Exception) -> str:
    # KeyError wraps its message in quotes.
    return error.args[0] if isinstance(error, KeyError) and error.args else str(error)

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _emit(store: NodeStore, fmt: str, output_path: Optional[str]) -> None:
    text = exporter.render(store, fmt)
    if output_path:
        target = write_text(os.path.abspath(output_path), text if text.endswith("\n") else text + "\n")
        logger.info(f"Output written to {target}")
    else:
        print(text)


def _print_matches(store: NodeStore, query: str) -> None:
    for node_id in matches(store, query, include_root=True):
        print(path_of(store, node_id) or store[node_id].name)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
