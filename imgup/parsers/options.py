"""Command-line option parsing and validation."""

from __future__ import annotations

import argparse
import os
import re
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

from imgup.config import Settings
from imgup.errors import ApiKeyNotFoundError, ValidationError
from imgup.models.request import OutputFormat, SourceMode, UploadRequest
from imgup.parsers.duration import parse_duration

MONITOR_PATTERN = re.compile(r"[0-9]+")

# Sentinel for -M given without a number
USE_DEFAULT_MONITOR = ""


class ImgupArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors as ValidationError.

    argparse exits with status 2 on bad arguments; the tool reports every
    failure with status 1 through a single error path instead.
    """

    def error(self, message: str) -> NoReturn:
        raise ValidationError(message, show_usage=True)


def create_parser() -> ImgupArgumentParser:
    """Build the argument parser."""
    parser = ImgupArgumentParser(
        prog="imgup",
        description="Upload an image from the clipboard, a screenshot or a file to imgbb",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  imgup                      # Upload the image on the clipboard
  imgup photo.jpg            # Upload a file
  imgup -s --markdown        # Select a region, print a Markdown image link
  imgup -M 1 -e 1h           # Capture monitor 1, delete after one hour

Durations: <number>[s|m|h|d], minutes when no unit is given,
between 1m and 180d. Use 0, none or never for no expiration.

The API key is read from IMGBB_API_KEY or from the config file
($XDG_CONFIG_HOME/imgup/config).
        """,
    )

    _ = parser.add_argument(
        "filepath",
        nargs="*",
        help="Image file to upload (default: read the clipboard)",
    )

    _ = parser.add_argument(
        "-e",
        "--expire",
        metavar="DURATION",
        help="Delete the image after DURATION",
    )

    _ = parser.add_argument(
        "-n",
        "--name",
        metavar="NAME",
        help="Custom name for the uploaded image "
        + "(write --name=-NAME for names starting with a dash)",
    )

    _ = parser.add_argument(
        "--markdown",
        dest="output_format",
        action="store_const",
        const=OutputFormat.MARKDOWN,
        help="Print the URL as a Markdown image link",
    )

    _ = parser.add_argument(
        "--org",
        dest="output_format",
        action="store_const",
        const=OutputFormat.ORG,
        help="Print the URL as an Org-mode link",
    )

    _ = parser.add_argument(
        "-s",
        "--select",
        action="store_true",
        help="Take a screenshot of an interactively selected region",
    )

    _ = parser.add_argument(
        "-M",
        "--monitor",
        nargs="?",
        const=USE_DEFAULT_MONITOR,
        metavar="NUM",
        help="Take a screenshot of monitor NUM (default: DEFAULT_MONITOR from config)",
    )

    _ = parser.add_argument(
        "--no-copy",
        action="store_true",
        help="Do not copy the result to the clipboard",
    )

    _ = parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Do not send desktop notifications",
    )

    _ = parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output for debugging",
    )

    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Options and the file path may appear in any order. ``--help`` exits
    with status 0 before anything else is checked.

    Raises:
        ValidationError: On unknown flags or malformed arguments
    """
    return create_parser().parse_intermixed_args(argv)


def _check_exclusive_sources(file_path: str | None, select: bool, monitor: str | None) -> None:
    if file_path is not None and select:
        raise ValidationError(f"Cannot combine a file path ('{file_path}') with --select")
    if file_path is not None and monitor is not None:
        raise ValidationError(f"Cannot combine a file path ('{file_path}') with --monitor")
    if select and monitor is not None:
        raise ValidationError("Cannot combine --select with --monitor")


def _validate_file(value: str) -> Path:
    path = Path(value).expanduser()
    if not path.exists():
        raise ValidationError(f"File not found: {value}")
    if not path.is_file():
        raise ValidationError(f"Not a regular file: {value}")
    if not os.access(path, os.R_OK):
        raise ValidationError(f"File is not readable: {value}")
    return path


def _validate_monitor(value: str, settings: Settings) -> int:
    if value == USE_DEFAULT_MONITOR:
        return settings.default_monitor
    if not MONITOR_PATTERN.fullmatch(value):
        raise ValidationError(
            f"Invalid monitor number '{value}': expected a non-negative integer such as 0 or 1"
        )
    return int(value)


def build_request(
    args: argparse.Namespace, settings: Settings
) -> tuple[UploadRequest, Settings]:
    """
    Validate parsed arguments against settings and build the request.

    Command-line values override settings. Checks run before any external
    tool or network call.

    Args:
        args: Namespace from ``parse_arguments``
        settings: Defaults from the config file and environment

    Returns:
        tuple: The UploadRequest and the settings with flag overrides applied

    Raises:
        ValidationError: On contradictory or invalid options
        ApiKeyNotFoundError: If no API key is configured
    """
    files: list[str] = list(args.filepath or [])
    if len(files) > 1:
        quoted = " and ".join(f"'{value}'" for value in files)
        raise ValidationError(f"Only one file path may be given, got {quoted}", show_usage=True)
    file_arg = files[0] if files else None

    select: bool = bool(args.select)
    monitor_arg: str | None = args.monitor
    _check_exclusive_sources(file_arg, select, monitor_arg)

    monitor_index = _validate_monitor(monitor_arg, settings) if monitor_arg is not None else None

    expiration = settings.default_expiration
    if args.expire is not None:
        expiration = parse_duration(args.expire)

    custom_name: str | None = args.name
    if custom_name is not None and custom_name == "":
        raise ValidationError("Custom name must not be empty")

    output_format: OutputFormat = args.output_format or settings.output_format

    file_path = _validate_file(file_arg) if file_arg is not None else None

    if not settings.api_key:
        raise ApiKeyNotFoundError(
            "imgbb API key not found",
            details=(
                "Set IMGBB_API_KEY in the environment or add "
                + f"IMGBB_API_KEY=your_api_key to {settings.config_path or 'the config file'}"
            ),
        )

    if file_path is not None:
        source_mode = SourceMode.FILE
    elif select:
        source_mode = SourceMode.REGION_SCREENSHOT
    elif monitor_index is not None:
        source_mode = SourceMode.MONITOR_SCREENSHOT
    else:
        source_mode = SourceMode.CLIPBOARD

    request = UploadRequest(
        source_mode=source_mode,
        api_key=settings.api_key,
        output_format=output_format,
        file_path=file_path,
        monitor_index=monitor_index,
        expiration_seconds=expiration,
        custom_name=custom_name,
    )

    settings = replace(
        settings,
        copy_to_clipboard=settings.copy_to_clipboard and not args.no_copy,
        notify=settings.notify and not args.no_notify,
        verbose=settings.verbose or bool(args.verbose),
    )
    return request, settings
