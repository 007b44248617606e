"""CLI application entry point and command routing for upctl.

This module is the **sole error boundary** for the entire application.
It catches :class:`~upctl.exceptions.UpctlError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via
Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  services and the infrastructure adapters.
* The service's success message is the only thing written to stdout;
  everything else goes to stderr.
* Usage is re-printed only for :class:`~upctl.exceptions.UsageError`;
  network and service failures are reported as plain errors.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from upctl.cli import exit_codes
from upctl.cli.console import console
from upctl.core.models import ClientConfig, ExpireDirective
from upctl.exceptions import UpctlError, UsageError
from upctl.version import __version__

DESCRIBE_ALIASES: tuple[str, ...] = ("des", "info", "i", "list", "ls")

Handler = Callable[[argparse.Namespace, ClientConfig], int]


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``upctl upload [-e EXPIRE] PATH...``
    * ``upctl describe CONTEXT`` (aliases: des, info, i, list, ls)
    * ``upctl --version``
    """
    parser = argparse.ArgumentParser(
        prog="upctl",
        description="Upload files to an upload api and query existing uploads.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-c", "--config", default=None, help="Path to a TOML config file.")
    parser.add_argument("-u", "--endpoint", default=None, help="Base URL of the upload api.")
    parser.add_argument("-a", "--apikey", default=None, help="Bearer token for the api.")
    parser.add_argument(
        "-r",
        "--retries",
        type=int,
        default=None,
        help="How often to retry failed requests (0 disables retries).",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=None,
        help="Trace requests, responses and retries.",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    upload = commands.add_parser(
        "upload",
        help="Upload files.",
        description="Upload files and directories to an upload api.",
    )
    upload.add_argument("paths", nargs="*", metavar="PATH", help="Files or directories.")
    upload.add_argument(
        "-e",
        "--expire",
        default=None,
        help="Expire setting: asap or duration (accepted shortcuts: dmh).",
    )
    upload.set_defaults(handler=_handle_upload, command_parser=upload)

    describe = commands.add_parser(
        "describe",
        aliases=list(DESCRIBE_ALIASES),
        help="Describe uploads of an api context.",
        description="Show uploads stored under an api context.",
    )
    describe.add_argument("identifier", nargs="?", default=None, metavar="CONTEXT")
    describe.set_defaults(handler=_handle_describe, command_parser=describe)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_upload(args: argparse.Namespace, config: ClientConfig) -> int:
    """Validate arguments, then run the upload with Rich progress."""
    if not args.paths:
        raise UsageError("No files specified to upload!")
    expire = ExpireDirective.parse(args.expire) if args.expire else None

    from upctl.cli.progress import RichUploadProgress
    from upctl.core.upload_service import UploadService
    from upctl.infra.file_collector import FilesystemCollector
    from upctl.infra.http_transport import transport_factory

    service = UploadService(config, transport_factory, FilesystemCollector())
    with RichUploadProgress() as progress:
        message = service.upload(args.paths, expire=expire, progress_callback=progress)

    _emit(message)
    return exit_codes.SUCCESS


def _handle_describe(args: argparse.Namespace, config: ClientConfig) -> int:
    """Validate the identifier, then query the list endpoint."""
    if not args.identifier:
        raise UsageError("No api context specified to describe!")

    from upctl.core.list_service import ListService
    from upctl.infra.http_transport import transport_factory

    service = ListService(config, transport_factory)
    _emit(service.list(args.identifier))
    return exit_codes.SUCCESS


def _emit(message: str) -> None:
    """Print the service's success message; an empty message prints nothing."""
    if message:
        print(message)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the upctl CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler: Handler | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return exit_codes.SUCCESS

    from upctl.cli.config import resolve_config
    from upctl.cli.console import configure_logging

    config = resolve_config(args, version=__version__)
    configure_logging(config.debug)

    try:
        return handler(args, config)
    except UsageError:
        args.command_parser.print_usage(sys.stderr)
        raise


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except UsageError as exc:
        _print_error(exc)
        sys.exit(exit_codes.USAGE_ERROR)
    except UpctlError as exc:
        _print_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)


def _print_error(exc: UpctlError) -> None:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
