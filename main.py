#!/usr/bin/env python3
"""
imgup

A command-line tool that takes an image from the clipboard, an interactive
screenshot, a monitor capture or a file, uploads it to imgbb and prints the
shareable URL, optionally as a Markdown or Org-mode link, copying it to the
clipboard as well.

Usage:
    uv run main.py [options] [filepath]
"""

from __future__ import annotations

import signal
import sys
import traceback
from collections.abc import Sequence
from types import FrameType

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from imgup.config import Settings, load_settings
from imgup.errors import ApiError, DependencyError, ImgupError, ToolError, ValidationError
from imgup.models.request import UploadRequest
from imgup.models.upload import UploadFailure
from imgup.notify import create_notifier
from imgup.output.interpreter import format_url, interpret_response
from imgup.parsers.options import build_request, create_parser, parse_arguments
from imgup.progress.reporter import Reporter
from imgup.sources.clipboard import copy_text
from imgup.sources.resolver import check_dependencies, resolve_payload
from imgup.uploaders.imgbb import ImgbbUploader

# Status messages go to stderr; stdout carries only the result
console = Console(stderr=True)


def _terminate(signum: int, frame: FrameType | None) -> None:
    # Unwind through context managers so staged files are removed
    raise SystemExit(1)


def upload(request: UploadRequest, settings: Settings, reporter: Reporter) -> str:
    """Acquire, upload and interpret; return the formatted output.

    Args:
        request: Validated upload request
        settings: Settings with command-line overrides applied
        reporter: Console and notification sink

    Returns:
        The URL rendered in the requested output format

    Raises:
        ImgupError: On any dependency, acquisition, transport or API failure
    """
    check_dependencies(request, settings)

    uploader = ImgbbUploader(request.api_key, timeout=settings.upload_timeout)

    with resolve_payload(request, settings) as payload:
        reporter.debug(
            f"Acquired {payload.size} bytes from {payload.source_mode.value} "
            + f"as {payload.filename} ({payload.mime_type})"
        )
        if request.expiration_seconds is not None:
            reporter.debug(f"Expiration: {request.expiration_seconds} seconds")
        if request.custom_name is not None:
            reporter.debug(f"Name: {request.custom_name}")

        with reporter.track_upload() as progress_callback:
            body = uploader.upload(
                payload,
                expiration_seconds=request.expiration_seconds,
                custom_name=request.custom_name,
                progress_callback=progress_callback,
            )

    reporter.debug(f"Response: {body}")

    result = interpret_response(body)
    if isinstance(result, UploadFailure):
        raise ApiError(f"Upload failed: {result.reason}", result.raw_response)

    return format_url(result.url, request.output_format)


def copy_result(output: str, settings: Settings, reporter: Reporter) -> None:
    """Copy the result to the clipboard; failures only warn."""
    if not settings.copy_to_clipboard:
        return
    try:
        copy_text(settings.clipboard_backend, output)
    except (DependencyError, ToolError) as e:
        reporter.display_warning(f"Result not copied to clipboard: {e.message}")
        return
    reporter.debug(f"Copied to clipboard with {settings.clipboard_backend.writer}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for imgup."""
    # Load environment variables from .env file
    _ = load_dotenv()

    signal.signal(signal.SIGTERM, _terminate)

    # Notify by default until flags and settings say otherwise
    reporter = Reporter(console, notifier=create_notifier(True))

    try:
        args = parse_arguments(argv)
        if args.no_notify:
            reporter.notifier = create_notifier(False)

        settings = load_settings()
        reporter.notifier = create_notifier(settings.notify and not args.no_notify)

        request, settings = build_request(args, settings)
        reporter.verbose = settings.verbose
        reporter.debug(f"Config file: {settings.config_path}")
        reporter.debug(f"Source: {request.source_mode.value}")

        output = upload(request, settings, reporter)

        print(output)
        copy_result(output, settings, reporter)
        reporter.display_success("Image uploaded")
        reporter.notify_success(output)

    except ImgupError as e:
        if isinstance(e, ValidationError) and e.show_usage:
            create_parser().print_usage(sys.stderr)
        reporter.display_error(e.message, e.details)
        reporter.notify_failure(e.message)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(1)
    except Exception as e:
        reporter.display_error(f"Unexpected error: {e}")
        if reporter.verbose:
            console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
        reporter.notify_failure(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
