"""
Command line entry point for the Appetit interpreter.

Usage:
    appetit [--allowexec] [--verbose] [--dev] [--timer] [--no-colour]
            [--config PATH] script
    appetit --create PATH
    appetit --version

This is the only place that prints diagnostics and ends the process.
The exit status is always 0; failures are reported on stdout.
"""

import argparse
import logging
import os
import platform
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

import structlog
from dotenv import load_dotenv

from . import LANG_NAME, LANG_VERSION, __version__
from .core.config import ConfigLoader
from .core.errors import AppetitError, ErrorCategory, ScriptExit
from .engine.diagnostics import DiagnosticFormatter
from .interpreter import Interpreter


logger = structlog.get_logger()

TEMPLATE_SCRIPT = (
    "#!/usr/bin/appetit\n"
    f"minver {LANG_VERSION}\n"
    "\n"
    "- Say hello to the world\n"
    "writeln \"Hello World!\"\n"
)


def configure_logging(verbose: bool = False) -> None:
    """Configure structured logging to stderr."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.INFO if verbose else logging.WARNING,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if os.getenv("LOG_FORMAT") == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appetit",
        description=f"{LANG_NAME} {LANG_VERSION} script interpreter",
    )
    parser.add_argument("script", nargs="?", help="Script to run")
    parser.add_argument(
        "--allowexec", action="store_true", default=None,
        help="Allow execution of system commands",
    )
    parser.add_argument(
        "--verbose", action="store_true", default=None,
        help="Log each step to stderr",
    )
    parser.add_argument(
        "--dev", action="store_true", default=None,
        help="Print tokens instead of running the script, then a token summary",
    )
    parser.add_argument(
        "--timer", action="store_true", default=None,
        help="Print the running time when finished",
    )
    parser.add_argument(
        "--no-colour", "--no-color", dest="no_colour", action="store_true",
        help="Disable coloured diagnostics",
    )
    parser.add_argument("--config", metavar="PATH", help="Interpreter config file")
    parser.add_argument("--create", metavar="PATH", help="Create a template script at PATH")
    parser.add_argument(
        "--version", action="store_true",
        help="Show the language version and platform",
    )
    return parser


def create_template(path: str, stdout: TextIO) -> None:
    """Write a starter script to path (a leading ~ is expanded)."""
    target = os.path.expanduser(path)
    try:
        Path(target).write_text(TEMPLATE_SCRIPT)
    except OSError as e:
        raise AppetitError(
            f"There was an error creating the script at {path}. Make sure "
            f"that you can save a file in that location. ({e.strerror})",
            category=ErrorCategory.RUNTIME,
        )
    stdout.write(f":: Created a script at {target}\n")


def version_info() -> str:
    """Language, install and platform details."""
    return (
        f"{LANG_NAME} {LANG_VERSION} (interpreter {__version__})\n"
        f"Installed to {Path(__file__).resolve().parent}\n"
        "\n"
        "[Platform]\n"
        f"\tOperating System: {platform.system().lower()}\n"
        f"\tArchitecture: {platform.machine().lower()}\n"
        f"\tCPUs: {os.cpu_count()}\n"
        "\n"
        "[Build]\n"
        f"\tPython Version: {platform.python_version()}\n"
    )


def format_token_summary(summary: dict) -> str:
    peak = summary["peak_memory_kb"]
    return (
        "\n\nToken Summary\n"
        f":: Total Tokens (incl. line number tokens): {summary['total_tokens']}\n"
        f":: Total Memory Usage of the token tree: {summary['token_tree_bytes']} "
        f"bytes (single token: {summary['token_bytes']} bytes)\n"
        "\nMemory Information\n"
        f":: Peak Resident Memory: "
        f"{'n/a' if peak is None else f'{peak} kilobytes'}\n"
        f":: Garbage Collections: {summary['gc_collections']}\n"
    )


def main(
    argv: Optional[list[str]] = None,
    stdout: Optional[TextIO] = None,
    stdin: Optional[TextIO] = None,
) -> int:
    """
    Run the interpreter.

    Returns:
        Process exit status, always 0
    """
    stdout = stdout or sys.stdout
    load_dotenv()

    args = build_parser().parse_args(argv)
    configure_logging(bool(args.verbose))

    colour = not args.no_colour and "NO_COLOR" not in os.environ
    formatter = DiagnosticFormatter(colour=colour and stdout.isatty())
    start_time = time.monotonic()
    interpreter: Optional[Interpreter] = None

    try:
        if args.create:
            create_template(args.create, stdout)
            return 0

        if args.version:
            stdout.write(version_info())
            return 0

        if not args.script:
            raise AppetitError(
                "No script was passed to the interpreter. Pass the path of a "
                "script to run, for example: appetit hello.apt",
                category=ErrorCategory.RUNTIME,
            )

        config = ConfigLoader().load(
            args.config,
            overrides={
                "allow_exec": args.allowexec,
                "verbose": args.verbose,
                "dev": args.dev,
                "timer": args.timer,
                "colour": False if args.no_colour else None,
            },
        )
        if config.verbose and not args.verbose:
            configure_logging(True)
        formatter.colour = config.colour and colour and stdout.isatty()

        logger.info("config_loaded", config_hash=config.config_hash())

        interpreter = Interpreter(config=config, stdin=stdin, stdout=stdout)
        interpreter.run_file(args.script)

    except ScriptExit:
        pass
    except AppetitError as e:
        logger.info("script_failed", **e.to_dict())
        formatter.emit(e, stdout)

    if interpreter is not None and interpreter.config.dev:
        stdout.write(format_token_summary(interpreter.token_summary()))

    if interpreter is not None and interpreter.config.timer:
        stdout.write(f"\nTime: {time.monotonic() - start_time:.6f}s\n")

    stdout.flush()
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
