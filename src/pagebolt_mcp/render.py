"""
Output rendering and formatting for PageBolt results.

Turns API response envelopes into the plain-text summaries handed back to
the assistant, and guards the paths that binary outputs are written to.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.json import JSON
from rich.table import Table

from .models import (
    CaptureResult,
    DevicesResult,
    InspectResult,
    SequenceOutput,
    SequenceResult,
    UsageResult,
    VideoResult,
)

IMAGE_MIME_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "webp": "image/webp",
}


class Renderer:
    """Console renderer for the CLI, with a machine-readable JSON mode."""

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize renderer."""
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console()
        self.err_console = Console(stderr=True)

    def print(self, message: str, **kwargs) -> None:
        """Print message with appropriate formatting."""
        if self.quiet and not self.json_output:
            return
        self.console.print(message, **kwargs)

    def print_json(self, data: Any) -> None:
        """Print JSON data."""
        if self.json_output:
            print(json.dumps(data, indent=2))
        else:
            self.console.print(JSON.from_data(data))

    def print_table(self, data: List[Dict[str, Any]], title: Optional[str] = None) -> None:
        """Print data as table."""
        if self.json_output:
            print(json.dumps(data, indent=2))
            return

        if not data:
            self.print("No data to display")
            return

        table = Table(title=title)
        for key in data[0].keys():
            table.add_column(key.replace("_", " ").title())
        for row in data:
            table.add_row(*[str(v) for v in row.values()])
        self.console.print(table)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.err_console.print(f"Error: {message}", style="red")

    def print_success(self, message: str) -> None:
        """Print success message."""
        if self.quiet:
            return
        self.console.print(message, style="green")


def image_mime_type(fmt: Optional[str]) -> str:
    """Map an image format name to its MIME type, defaulting to PNG."""
    return IMAGE_MIME_TYPES.get(fmt or "png", "image/png")


def _value(value: Any) -> str:
    if value is None:
        return "undefined"
    # JSON numbers such as 2.0 print as 2
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_kb(size: Optional[float]) -> str:
    return f"{(size or 0) / 1024:.1f} KB"


def format_seconds(duration_ms: Optional[float]) -> str:
    return f"{(duration_ms or 0) / 1000:.1f}s"


def safe_path_join(base_dir: Path, filename: str) -> Path:
    """Safely join paths, preventing directory traversal."""
    base_resolved = base_dir.resolve()

    result_path = (base_dir / filename).resolve()

    try:
        result_path.relative_to(base_resolved)
        return result_path
    except ValueError:
        raise ValueError(f"Unsafe path: {filename} resolves outside {base_resolved}")


def resolve_output_path(save_to: Optional[str], default: str) -> Path:
    """Resolve an output file path; it must stay inside the working directory."""
    path = safe_path_join(Path.cwd(), save_to or default)
    if path.is_dir():
        raise ValueError(f"Output path {path} is a directory, expected a file path")
    return path


def capture_summary(label: str, fmt: str, result: CaptureResult) -> str:
    return (
        f"{label} successfully. Format: {fmt}, "
        f"Size: {_value(result.size_bytes)} bytes, Duration: {_value(result.duration_ms)}ms"
    )


def metadata_summary(metadata: dict) -> str:
    return "Page metadata:\n" + json.dumps(metadata, indent=2)


def pdf_summary(path: Path, result: CaptureResult) -> str:
    return (
        "PDF generated successfully.\n"
        f"  File: {path}\n"
        f"  Size: {_value(result.size_bytes)} bytes\n"
        f"  Duration: {_value(result.duration_ms)}ms"
    )


def sequence_output_caption(output: SequenceOutput) -> str:
    if output.type == "screenshot":
        return (
            f"[{output.name}] Screenshot — {output.format}, "
            f"{_value(output.size_bytes)} bytes, step {_value(output.step_index)}"
        )
    return (
        f"[{output.name}] PDF generated — {output.format}, {_value(output.size_bytes)} bytes, "
        f"step {_value(output.step_index)} (base64 data available in raw response)"
    )


def sequence_summary(result: SequenceResult) -> str:
    summary = (
        f"Sequence complete: {_value(result.steps_completed)}/{_value(result.total_steps)} steps, "
        f"{len(result.outputs)} outputs, {_value(result.total_duration_ms)}ms total."
    )
    failed = result.failed_steps
    if failed:
        details = "; ".join(f"Step {s.step_index} ({s.action}): {s.error}" for s in failed)
        summary += f"\nFailed steps: {details}"
    summary += (
        f"\nUsage: {_value(result.usage.outputs_charged)} request(s) charged, "
        f"{_value(result.usage.remaining)} remaining."
    )
    return summary


def video_summary(path: Path, result: VideoResult) -> str:
    return (
        "Video recorded successfully.\n"
        f"  File:     {path}\n"
        f"  Format:   {_value(result.format)}\n"
        f"  Size:     {format_kb(result.size_bytes)}\n"
        f"  Duration: {format_seconds(result.duration_ms)}\n"
        f"  Frames:   {_value(result.frames)}\n"
        f"  Steps:    {_value(result.steps_completed)}/{_value(result.total_steps)} completed\n"
        f"  Cost:     {_value(result.usage.video_cost)} API requests\n"
        f"  Remaining: {_value(result.usage.remaining)} requests"
    )


def inspect_report(result: InspectResult, requested_url: Optional[str] = None) -> str:
    """Format an inspection as structured text for efficient LLM consumption."""
    lines: List[str] = []

    lines.append(
        f"Page: {result.title or '(untitled)'} "
        f"({result.url or requested_url or 'html content'})"
    )
    if result.metadata:
        if result.metadata.description:
            lines.append(f"Description: {result.metadata.description}")
        if result.metadata.lang:
            lines.append(f"Language: {result.metadata.lang}")
        if result.metadata.http_status_code:
            lines.append(f"HTTP Status: {result.metadata.http_status_code}")
    lines.append("")

    if result.headings:
        lines.append(f"Headings ({len(result.headings)}):")
        for h in result.headings:
            lines.append(f"  H{h.level}: {h.text} — selector: {h.selector}")
        lines.append("")

    if result.elements:
        lines.append(f"Interactive Elements ({len(result.elements)}):")
        for el in result.elements:
            attrs = el.attributes
            desc = f"[{el.tag}"
            if attrs.get("type"):
                desc += f" type={attrs['type']}"
            desc += "]"
            if el.text:
                desc += f' "{el.text}"'
            if attrs.get("placeholder"):
                desc += f' placeholder="{attrs["placeholder"]}"'
            if attrs.get("href"):
                desc += f" → {attrs['href']}"
            desc += f" — selector: {el.selector}"
            lines.append(f"  {desc}")
        lines.append("")

    if result.forms:
        lines.append(f"Forms ({len(result.forms)}):")
        for f in result.forms:
            lines.append(
                f"  {f.selector} ({f.method or 'GET'} {f.action or '(none)'}): "
                f"{len(f.fields)} field(s)"
            )
            for field in f.fields:
                lines.append(f"    - {field}")
        lines.append("")

    if result.links:
        lines.append(f"Links ({len(result.links)}):")
        for link in result.links:
            lines.append(f'  "{link.text or "(no text)"}" → {link.href} — selector: {link.selector}')
        lines.append("")

    if result.images:
        lines.append(f"Images ({len(result.images)}):")
        for img in result.images:
            alt = f'"{img.alt}"' if img.alt else "(no alt)"
            lines.append(f"  {alt} src={img.src} — selector: {img.selector}")
        lines.append("")

    lines.append(f"Duration: {_value(result.duration_ms)}ms")
    return "\n".join(lines)


def device_listing(result: DevicesResult) -> str:
    lines = []
    for d in result.devices:
        mobile = ", mobile" if d.is_mobile else ""
        touch = ", touch" if d.has_touch else ""
        vp = d.viewport
        scale = _value(vp.device_scale_factor)
        lines.append(f"  {d.name} — {vp.width}x{vp.height} @{scale}x{mobile}{touch}")

    return (
        f"Available device presets ({len(result.devices)}):\n"
        + "\n".join(lines)
        + '\n\nUse the device name as the "viewport_device" parameter in take_screenshot.'
    )


def usage_report(result: UsageResult) -> str:
    usage = result.usage
    return (
        "PageBolt Usage\n"
        f"  Plan:      {result.plan}\n"
        f"  Used:      {usage.current:,} / {usage.limit:,} requests\n"
        f"  Remaining: {usage.remaining:,}\n"
        f"  Usage:     {result.percent_used}%"
    )
