"""Screenshot capture through flameshot, maim or grim."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from imgup.errors import AcquisitionError, ConfigError, ToolError
from imgup.models.payload import ImagePayload
from imgup.models.request import SourceMode
from imgup.sources.tools import decode_stderr, require_tool, run_tool

# flameshot is the only supported tool that addresses monitors by index
MONITOR_TOOL = "flameshot"


class ScreenshotTool(Enum):
    """Supported interactive region-capture tools."""

    FLAMESHOT = "flameshot"
    MAIM = "maim"
    GRIM = "grim"

    @classmethod
    def from_name(cls, value: str) -> ScreenshotTool:
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ConfigError(
                f"Unsupported screenshot tool '{value}' (expected one of: {valid})"
            ) from None

    @property
    def executables(self) -> tuple[str, ...]:
        if self is ScreenshotTool.GRIM:
            return ("grim", "slurp")
        return (self.value,)

    def region_command(self, geometry: str | None = None) -> list[str]:
        """Command that writes a PNG of the selected region to stdout."""
        if self is ScreenshotTool.FLAMESHOT:
            return ["flameshot", "gui", "--raw"]
        if self is ScreenshotTool.MAIM:
            return ["maim", "--select", "--format", "png"]
        if geometry is None:
            raise ValueError("grim needs a geometry from slurp")
        return ["grim", "-t", "png", "-g", geometry, "-"]


def monitor_command(index: int, destination: Path) -> list[str]:
    return [MONITOR_TOOL, "screen", "--number", str(index), "--path", str(destination)]


def _select_geometry() -> str:
    result = run_tool(["slurp"])
    if result.returncode != 0:
        raise ToolError(
            "slurp",
            result.returncode,
            source="region screenshot",
            message="Region selection was cancelled or failed",
            stderr=decode_stderr(result),
        )
    geometry = result.stdout.decode("utf-8", errors="replace").strip()
    if not geometry:
        raise AcquisitionError("slurp returned no region", source="region screenshot")
    return geometry


def capture_region(tool: ScreenshotTool) -> ImagePayload:
    """
    Let the user select a screen region and capture it.

    The tool's exit status is checked before its output is used, so a
    failed capture is reported even when it wrote partial bytes.

    Args:
        tool: Configured region-capture tool

    Returns:
        ImagePayload: In-memory PNG payload

    Raises:
        DependencyError: If the tool (or slurp for grim) is missing
        ToolError: If the tool exits non-zero
        AcquisitionError: If the tool produced no image bytes
    """
    for executable in tool.executables:
        require_tool(executable, "region screenshots")

    geometry = _select_geometry() if tool is ScreenshotTool.GRIM else None
    result = run_tool(tool.region_command(geometry))
    if result.returncode != 0:
        raise ToolError(
            tool.value,
            result.returncode,
            source="region screenshot",
            message="Region screenshot failed",
            stderr=decode_stderr(result),
        )
    if not result.stdout:
        raise AcquisitionError(
            "Region screenshot produced no image data (was the selection cancelled?)",
            source="region screenshot",
        )

    return ImagePayload(
        filename="screenshot.png",
        mime_type="image/png",
        source_mode=SourceMode.REGION_SCREENSHOT,
        data=result.stdout,
    )


def capture_monitor(index: int, destination: Path) -> ImagePayload:
    """
    Capture a whole monitor into a file the caller owns.

    Args:
        index: Zero-based monitor number
        destination: File path to write the PNG to

    Returns:
        ImagePayload: Payload backed by ``destination``

    Raises:
        DependencyError: If flameshot is missing
        ToolError: If flameshot exits non-zero
        AcquisitionError: If no image was written
    """
    require_tool(MONITOR_TOOL, "monitor screenshots")

    result = run_tool(monitor_command(index, destination))
    if result.returncode != 0:
        raise ToolError(
            MONITOR_TOOL,
            result.returncode,
            source="monitor screenshot",
            message=f"Screenshot of monitor {index} failed",
            stderr=decode_stderr(result),
        )
    if not destination.exists() or destination.stat().st_size == 0:
        raise AcquisitionError(
            f"Screenshot of monitor {index} produced no image data",
            source="monitor screenshot",
        )

    return ImagePayload(
        filename=f"monitor-{index}.png",
        mime_type="image/png",
        source_mode=SourceMode.MONITOR_SCREENSHOT,
        path=destination,
    )
