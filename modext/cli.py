"""CLI entrypoints for modext commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .evaluation import EvaluationFileError, load_evaluation
from .logging import configure_logging, get_logger
from .metadata.errors import ExtensionMetadataError
from .models import RootModuleFileFixup

EXIT_FIXUP_NEEDED = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modext",
        description="Check use_repo imports against the direct dependencies reported by module extensions.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Report the use_repo edits needed for one extension evaluation.",
    )
    check_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Increase log verbosity for troubleshooting.",
    )
    check_parser.add_argument("path", help="Path to the evaluation document (YAML or JSON).")
    check_parser.add_argument(
        "--config",
        default=None,
        help="Path to .modext.yml (defaults to the evaluation document's directory).",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the fixup as JSON instead of text.",
    )
    check_parser.add_argument(
        "--fail-on-fixup",
        action="store_true",
        default=None,
        help=f"Exit with status {EXIT_FIXUP_NEEDED} when use_repo calls need edits.",
    )
    check_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug logs to this file.",
    )
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing the check endpoint.",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for modext commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if getattr(args, "log_file", None) else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    logger = get_logger("cli")

    if args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    evaluation_path = Path(args.path)
    config_path = Path(args.config) if args.config else evaluation_path.parent
    try:
        config = load_config(config_path)
        evaluation = load_evaluation(evaluation_path)
        fixup = evaluation.check(fix_command=config.fix_command)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except ExtensionMetadataError as exc:
        parser.exit(1, f"Error in extension metadata: {exc.message}\n")
    except (ConfigError, EvaluationFileError) as exc:
        parser.exit(1, f"modext check failed: {exc}\n")

    as_json = bool(args.json) or config.output_format == "json"
    fail_on_fixup = config.fail_on_fixup if args.fail_on_fixup is None else args.fail_on_fixup

    if fixup is None:
        logger.info("No use_repo edits needed for %s", evaluation.usage.extension_name)
        if as_json:
            print(json.dumps({"status": "ok", "fixup": None}, indent=2))
        else:
            print("use_repo imports are up to date")
        return

    if as_json:
        print(json.dumps({"status": "fixup", "fixup": fixup.to_dict()}, indent=2))
    else:
        print(render_fixup(fixup))
    if fail_on_fixup:
        parser.exit(EXIT_FIXUP_NEEDED)


def render_fixup(fixup: RootModuleFileFixup) -> str:
    """Format a fixup the way the event sink and file editor would present it."""
    warning = fixup.warning
    lines = [f"{warning.severity.value.upper()}: {warning.location}: {warning.message}", ""]
    for path, commands in fixup.module_file_path_to_commands.items():
        lines.append(f"Commands for {path}:")
        lines.extend(f"  {command}" for command in commands)
    return "\n".join(lines)


if __name__ == "__main__":
    main(sys.argv[1:])
