"""Command line application entry point for KartLab."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from ..errors import KartlabError
from ..logging.config import setup_logging
from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import build_parser

CommandHandler = Callable[..., str]


def _preliminary_parser() -> argparse.ArgumentParser:
    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding a [tool.kartlab] table.",
    )
    config_parser.add_argument("--log-level", dest="log_level", default=None)
    config_parser.add_argument("--log-output", dest="log_output", default=None)
    config_parser.add_argument(
        "--log-format", dest="log_format", choices=("json", "text"), default=None
    )
    return config_parser


def _logging_config(config: Mapping[str, Any], preliminary: argparse.Namespace) -> dict[str, Any]:
    raw = config.get("logging", {})
    logging_config = dict(raw) if isinstance(raw, Mapping) else {}
    if preliminary.log_level is not None:
        logging_config["level"] = preliminary.log_level
    if preliminary.log_output is not None:
        logging_config["output"] = preliminary.log_output
    if preliminary.log_format is not None:
        logging_config["format"] = preliminary.log_format
    logging_config.setdefault("level", "info")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "text")
    return logging_config


def _emit(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the KartLab command line interface and return its output.

    Errors are logged once, their message is printed and the process exits
    with the status code of the error category.
    """

    preliminary, _ = _preliminary_parser().parse_known_args(args)
    config = load_cli_config(preliminary.config_path)
    config["logging"] = _logging_config(config, preliminary)
    try:
        setup_logging(config)
    except (OSError, ValueError) as exc:
        _emit(f"Invalid logging configuration: {exc}")
        raise SystemExit(2) from exc

    parser = build_parser(config)
    namespace = parser.parse_args(args)
    namespace.config = config
    namespace.config_path = namespace.config_path or config.get("_config_path")

    handler: CommandHandler | None = getattr(namespace, "handler", None)
    if handler is None:
        raise CliError(
            f"Unknown command '{getattr(namespace, 'command', None)}'.",
            category="usage",
            context={"command": getattr(namespace, "command", None)},
        )

    try:
        try:
            result = handler(namespace, config=config)
        except KartlabError as exc:
            raise CliError.from_kartlab_error(exc) from exc
    except CliError as exc:
        if not exc.logged:
            log_cli_error(exc.payload, exc_info=exc)
            exc.logged = True
        if exc.payload.message:
            _emit(exc.payload.message)
        raise SystemExit(exc.status_code) from exc
    if result:
        _emit(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
