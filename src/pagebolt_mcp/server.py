"""
PageBolt MCP Server

MCP server that exposes PageBolt's screenshot, PDF, OG image, sequence,
video and inspection APIs as tools for AI coding assistants. Every tool
validates its arguments, makes one request to the PageBolt API and reshapes
the response into MCP content.
"""

import base64
import binascii
import logging
from typing import Annotated, Dict, List, Literal, Optional, Union

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, ContentBlock, ImageContent, TextContent
from pydantic import Field, ValidationError

from . import prompts
from .config import PageBoltConfig, load_config
from .http import PageBoltClient, PageBoltError
from .models import (
    ClickEffect,
    Clip,
    Cookie,
    Cursor,
    Geolocation,
    ImageFormat,
    PacePreset,
    SequenceStep,
    VideoFormat,
    VideoStep,
    Viewport,
    WaitUntil,
    Zoom,
    build_payload,
)
from .render import (
    capture_summary,
    device_listing,
    image_mime_type,
    inspect_report,
    metadata_summary,
    pdf_summary,
    resolve_output_path,
    sequence_output_caption,
    sequence_summary,
    usage_report,
    video_summary,
)

logger = logging.getLogger(__name__)

DOCS_URI = "pagebolt://api-docs"
DOCS_FALLBACK = (
    "Full API docs available at https://pagebolt.dev/docs or https://pagebolt.dev/llms-full.txt"
)

# Failures that become an error result instead of a protocol error.
TOOL_ERRORS = (PageBoltError, ValidationError, binascii.Error, OSError)

# Create MCP server
mcp = FastMCP("pagebolt", instructions=prompts.SERVER_INSTRUCTIONS)

_config: Optional[PageBoltConfig] = None
_client: Optional[PageBoltClient] = None


def configure(config: PageBoltConfig) -> None:
    """Install configuration; the HTTP client is rebuilt on next use."""
    global _config, _client
    _config = config
    _client = None


def get_client() -> PageBoltClient:
    """Get the shared PageBolt client, creating it on first use."""
    global _config, _client
    if _client is None:
        if _config is None:
            _config = load_config()
        _client = PageBoltClient(_config)
    return _client


def tool_failure(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


def _call_failure(label: str, error: Exception) -> CallToolResult:
    if isinstance(error, ValidationError):
        logger.warning(f"{label} returned an unexpected response: {error}")
        return tool_failure(f"{label} error: unexpected response from PageBolt API")

    logger.warning(f"{label} failed: {error}")
    return tool_failure(f"{label} error: {error}")


def _text(text: str) -> TextContent:
    return TextContent(type="text", text=text)


def _image(data: str, mime_type: str) -> ImageContent:
    return ImageContent(type="image", data=data, mimeType=mime_type)


# Parameters shared by take_screenshot and inspect_page
ViewportWidth = Annotated[
    Optional[int], Field(ge=1, le=3840, description="Viewport width in pixels (default: 1280)")
]
ViewportHeight = Annotated[
    Optional[int], Field(ge=1, le=2160, description="Viewport height in pixels (default: 720)")
]
ViewportDevice = Annotated[
    Optional[str],
    Field(
        description='Device preset for viewport emulation (e.g. "iphone_14_pro", "macbook_pro_14"). '
        "Use list_devices to see all presets."
    ),
]
ViewportMobile = Annotated[Optional[bool], Field(description="Enable mobile meta viewport emulation")]
ViewportHasTouch = Annotated[Optional[bool], Field(description="Enable touch event emulation")]
DeviceScaleFactor = Annotated[
    Optional[float],
    Field(ge=1, le=3, description="Device pixel ratio, use 2 for retina (default: 1)"),
]
WaitUntilOption = Annotated[
    Optional[WaitUntil],
    Field(description="When to consider navigation finished (default: networkidle2)"),
]
DarkMode = Annotated[Optional[bool], Field(description="Emulate dark color scheme (default: false)")]
ReducedMotion = Annotated[
    Optional[bool], Field(description="Emulate prefers-reduced-motion to disable animations")
]
UserAgent = Annotated[Optional[str], Field(description="Override the browser User-Agent string")]
Cookies = Annotated[
    Optional[List[Union[str, Cookie]]],
    Field(
        description='Cookies to set: array of "name=value" strings or { name, value, domain? } objects'
    ),
]
ExtraHeaders = Annotated[
    Optional[Dict[str, str]], Field(description="Extra HTTP headers to send with the request")
]
Authorization = Annotated[
    Optional[str], Field(description='Authorization header value (e.g. "Bearer <token>")')
]
BypassCSP = Annotated[Optional[bool], Field(description="Bypass Content-Security-Policy on the page")]
BlockBanners = Annotated[
    Optional[bool], Field(description="Hide cookie consent banners (default: false)")
]
BlockAds = Annotated[Optional[bool], Field(description="Block advertisements on the page")]
BlockChats = Annotated[Optional[bool], Field(description="Block live chat widgets on the page")]
BlockTrackers = Annotated[Optional[bool], Field(description="Block tracking scripts on the page")]
Delay = Annotated[
    Optional[int],
    Field(ge=0, le=10000, description="Milliseconds to wait before capture (default: 0)"),
]
SequenceViewport = Annotated[Optional[Viewport], Field(description="Browser viewport size")]


@mcp.tool()
async def take_screenshot(
    url: Annotated[
        Optional[str], Field(description="URL to capture (required if no html/markdown)")
    ] = None,
    html: Annotated[
        Optional[str], Field(description="Raw HTML to render (required if no url/markdown)")
    ] = None,
    markdown: Annotated[
        Optional[str], Field(description="Render Markdown content as a screenshot")
    ] = None,
    width: ViewportWidth = None,
    height: ViewportHeight = None,
    viewport_device: ViewportDevice = None,
    viewport_mobile: ViewportMobile = None,
    viewport_has_touch: ViewportHasTouch = None,
    device_scale_factor: DeviceScaleFactor = None,
    format: Annotated[Optional[ImageFormat], Field(description="Image format (default: png)")] = None,
    quality: Annotated[
        Optional[int], Field(ge=1, le=100, description="JPEG/WebP quality 1-100 (default: 80)")
    ] = None,
    omit_background: Annotated[
        Optional[bool], Field(description="Transparent background (PNG/WebP only)")
    ] = None,
    full_page: Annotated[
        Optional[bool], Field(description="Capture the full scrollable page (default: false)")
    ] = None,
    full_page_scroll: Annotated[
        Optional[bool],
        Field(description="Auto-scroll page before capture to trigger lazy-loaded images"),
    ] = None,
    full_page_max_height: Annotated[
        Optional[int], Field(description="Maximum pixel height cap for full-page captures")
    ] = None,
    selector: Annotated[
        Optional[str], Field(description="CSS selector to capture a specific element")
    ] = None,
    clip: Annotated[
        Optional[Clip], Field(description="Crop region { x, y, width, height } in pixels")
    ] = None,
    delay: Delay = None,
    wait_until: WaitUntilOption = None,
    wait_for_selector: Annotated[
        Optional[str], Field(description="Wait for this CSS selector to appear before capturing")
    ] = None,
    dark_mode: DarkMode = None,
    reduced_motion: ReducedMotion = None,
    media_type: Annotated[
        Optional[Literal["screen", "print"]], Field(description="Emulate CSS media type")
    ] = None,
    time_zone: Annotated[
        Optional[str], Field(description='Override browser timezone (e.g. "America/New_York")')
    ] = None,
    geolocation: Annotated[
        Optional[Geolocation],
        Field(description="Emulate geolocation { latitude, longitude, accuracy? }"),
    ] = None,
    user_agent: UserAgent = None,
    cookies: Cookies = None,
    headers: ExtraHeaders = None,
    authorization: Authorization = None,
    bypass_csp: BypassCSP = None,
    hide_selectors: Annotated[
        Optional[List[str]], Field(description="Array of CSS selectors to hide before capture")
    ] = None,
    click: Annotated[
        Optional[str], Field(description="CSS selector to click before capturing the screenshot")
    ] = None,
    block_banners: BlockBanners = None,
    block_ads: BlockAds = None,
    block_chats: BlockChats = None,
    block_trackers: BlockTrackers = None,
    extract_metadata: Annotated[
        Optional[bool],
        Field(
            description="Extract page metadata (title, description, OG tags) alongside the screenshot"
        ),
    ] = None,
) -> CallToolResult:
    """
    Capture a screenshot of a URL, HTML, or Markdown content. 30+ parameters including
    device emulation, ad/chat/tracker blocking, metadata extraction, geolocation, timezone,
    and more. Returns an image (PNG, JPEG, or WebP).
    """
    params = dict(locals())

    if not (url or html or markdown):
        return tool_failure('Error: One of "url", "html", or "markdown" is required.')

    fmt = format or "png"
    try:
        result = await get_client().screenshot(build_payload(params))
    except TOOL_ERRORS as e:
        return _call_failure("Screenshot", e)

    content: List[ContentBlock] = [
        _image(result.data, image_mime_type(fmt)),
        _text(capture_summary("Screenshot captured", fmt, result)),
    ]
    if result.metadata:
        content.append(_text(metadata_summary(result.metadata)))
    return CallToolResult(content=content)


@mcp.tool()
async def generate_pdf(
    url: Annotated[Optional[str], Field(description="URL to render as PDF (required if no html)")] = None,
    html: Annotated[
        Optional[str], Field(description="Raw HTML to render as PDF (required if no url)")
    ] = None,
    format: Annotated[
        Optional[str], Field(description="Paper format: A4, Letter, Legal, Tabloid (default: A4)")
    ] = None,
    landscape: Annotated[Optional[bool], Field(description="Landscape orientation (default: false)")] = None,
    print_background: Annotated[
        Optional[bool], Field(description="Include CSS backgrounds (default: true)")
    ] = None,
    margin: Annotated[
        Optional[str], Field(description='CSS margin for all sides, e.g. "1cm" or "0.5in"')
    ] = None,
    scale: Annotated[
        Optional[float], Field(ge=0.1, le=2, description="Rendering scale 0.1-2 (default: 1)")
    ] = None,
    page_ranges: Annotated[
        Optional[str], Field(description='Page ranges to include, e.g. "1-5, 8"')
    ] = None,
    delay: Annotated[
        Optional[int],
        Field(ge=0, le=10000, description="Milliseconds to wait before rendering (default: 0)"),
    ] = None,
    save_to: Annotated[
        Optional[str],
        Field(description="Output file path inside the working directory (default: ./output.pdf)"),
    ] = None,
) -> CallToolResult:
    """Generate a PDF from a URL or HTML content. Saves the PDF to disk and returns the file path."""
    params = dict(locals())

    if not (url or html):
        return tool_failure('Error: Either "url" or "html" is required.')

    try:
        output_path = resolve_output_path(save_to, "output.pdf")
    except ValueError as e:
        return tool_failure(f"Error: {e}")

    try:
        result = await get_client().pdf(build_payload(params, exclude=("save_to",)))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(base64.b64decode(result.data))
    except TOOL_ERRORS as e:
        return _call_failure("PDF", e)

    logger.info(f"Wrote PDF to {output_path}")
    return CallToolResult(content=[_text(pdf_summary(output_path, result))])


@mcp.tool()
async def create_og_image(
    template: Annotated[
        Optional[Literal["default", "minimal", "gradient"]],
        Field(description='Built-in template name (default: "default")'),
    ] = None,
    html: Annotated[
        Optional[str], Field(description="Custom HTML template (overrides template parameter)")
    ] = None,
    title: Annotated[
        Optional[str], Field(description='Main title text (default: "Your Title Here")')
    ] = None,
    subtitle: Annotated[Optional[str], Field(description="Subtitle text")] = None,
    logo: Annotated[Optional[str], Field(description="Logo image URL")] = None,
    bg_color: Annotated[
        Optional[str], Field(description='Background color as hex, e.g. "#0f172a"')
    ] = None,
    text_color: Annotated[Optional[str], Field(description='Text color as hex, e.g. "#f8fafc"')] = None,
    accent_color: Annotated[
        Optional[str], Field(description='Accent color as hex, e.g. "#6366f1"')
    ] = None,
    bg_image: Annotated[Optional[str], Field(description="Background image URL")] = None,
    width: Annotated[
        Optional[int], Field(ge=1, le=2400, description="Image width in pixels (default: 1200)")
    ] = None,
    height: Annotated[
        Optional[int], Field(ge=1, le=1260, description="Image height in pixels (default: 630)")
    ] = None,
    format: Annotated[Optional[ImageFormat], Field(description="Image format (default: png)")] = None,
) -> CallToolResult:
    """
    Generate an Open Graph / social card image. Returns an image using built-in templates
    or custom HTML.
    """
    params = dict(locals())

    fmt = format or "png"
    try:
        result = await get_client().og_image(build_payload(params))
    except TOOL_ERRORS as e:
        return _call_failure("OG image", e)

    return CallToolResult(
        content=[
            _image(result.data, image_mime_type(fmt)),
            _text(capture_summary("OG image created", fmt, result)),
        ]
    )


@mcp.tool()
async def run_sequence(
    steps: Annotated[
        List[SequenceStep],
        Field(
            min_length=1,
            max_length=20,
            description="Array of steps to execute in order. Must include at least one screenshot "
            "or pdf step. Max 20 steps, max 5 outputs.",
        ),
    ],
    viewport: SequenceViewport = None,
    dark_mode: DarkMode = None,
    block_banners: BlockBanners = None,
    device_scale_factor: Annotated[
        Optional[float], Field(ge=1, le=3, description="Device pixel ratio (default: 1)")
    ] = None,
) -> CallToolResult:
    """
    Execute a multi-step browser automation sequence. Navigate pages, interact with
    elements (click, fill, select), and capture multiple screenshots/PDFs in a single
    browser session. Each output counts as 1 API request.
    """
    params = dict(locals())

    if not steps:
        return tool_failure('Error: "steps" must be a non-empty array.')

    try:
        result = await get_client().sequence(build_payload(params))
    except TOOL_ERRORS as e:
        return _call_failure("Sequence", e)

    content: List[ContentBlock] = []
    for output in result.outputs:
        if output.type == "screenshot":
            if output.data:
                content.append(
                    _image(output.data, output.content_type or image_mime_type(output.format))
                )
            content.append(_text(sequence_output_caption(output)))
        elif output.type == "pdf":
            content.append(_text(sequence_output_caption(output)))

    content.append(_text(sequence_summary(result)))
    return CallToolResult(content=content)


@mcp.tool()
async def record_video(
    steps: Annotated[
        List[VideoStep],
        Field(
            min_length=1,
            max_length=50,
            description="Array of steps to execute and record. Max steps depends on plan (10-50).",
        ),
    ],
    viewport: SequenceViewport = None,
    format: Annotated[
        Optional[VideoFormat],
        Field(description="Video format (default: mp4). webm/gif require Starter+ plan."),
    ] = None,
    framerate: Annotated[
        Optional[int], Field(description="Frames per second: 24, 30, or 60 (default: 30)")
    ] = None,
    cursor: Annotated[Optional[Cursor], Field(description="Cursor appearance settings")] = None,
    zoom: Annotated[Optional[Zoom], Field(description="Auto-zoom settings for click actions")] = None,
    auto_zoom: Annotated[
        Optional[bool],
        Field(
            description="Shorthand: set to true to enable auto-zoom with defaults "
            "(same as zoom.enabled=true)"
        ),
    ] = None,
    click_effect: Annotated[
        Optional[ClickEffect], Field(description="Visual click effect settings")
    ] = None,
    pace: Annotated[
        Optional[Union[PacePreset, Annotated[float, Field(ge=0.25, le=6)]]],
        Field(
            description="Controls how deliberate the video feels. Number (0.25-6.0, higher = slower) "
            'or preset: "fast" (0.5x), "normal" (1x), "slow" (2x), "dramatic" (3x), '
            '"cinematic" (4.5x). Default: "normal".'
        ),
    ] = None,
    dark_mode: DarkMode = None,
    block_banners: Annotated[
        Optional[bool], Field(description="Hide cookie consent banners (default: true)")
    ] = None,
    device_scale_factor: Annotated[
        Optional[float], Field(ge=1, le=3, description="Device pixel ratio (default: 1)")
    ] = None,
    save_to: Annotated[
        Optional[str],
        Field(
            description="Output file path inside the working directory (default: ./recording.mp4)"
        ),
    ] = None,
) -> CallToolResult:
    """
    Record a professional demo video of a multi-step browser automation sequence. Produces
    MP4/WebM/GIF with automatic cursor highlighting, click ripple effects, smooth cursor
    movement, and auto-zoom on clicks. Each video costs 3 API requests. Saves to disk and
    returns the file path.
    """
    params = dict(locals())

    if not steps:
        return tool_failure('Error: "steps" must be a non-empty array.')

    try:
        output_path = resolve_output_path(save_to, f"recording.{format or 'mp4'}")
    except ValueError as e:
        return tool_failure(f"Error: {e}")

    try:
        result = await get_client().video(build_payload(params, exclude=("save_to",)))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(base64.b64decode(result.data))
    except TOOL_ERRORS as e:
        return _call_failure("Video recording", e)

    logger.info(f"Wrote video to {output_path}")
    return CallToolResult(content=[_text(video_summary(output_path, result))])


@mcp.tool()
async def inspect_page(
    url: Annotated[Optional[str], Field(description="URL to inspect (required if no html)")] = None,
    html: Annotated[
        Optional[str], Field(description="Raw HTML to inspect (required if no url)")
    ] = None,
    width: ViewportWidth = None,
    height: ViewportHeight = None,
    viewport_device: ViewportDevice = None,
    viewport_mobile: ViewportMobile = None,
    viewport_has_touch: ViewportHasTouch = None,
    device_scale_factor: DeviceScaleFactor = None,
    wait_until: WaitUntilOption = None,
    wait_for_selector: Annotated[
        Optional[str], Field(description="Wait for this CSS selector to appear before inspecting")
    ] = None,
    dark_mode: DarkMode = None,
    reduced_motion: ReducedMotion = None,
    user_agent: UserAgent = None,
    cookies: Cookies = None,
    headers: ExtraHeaders = None,
    authorization: Authorization = None,
    bypass_csp: BypassCSP = None,
    hide_selectors: Annotated[
        Optional[List[str]], Field(description="Array of CSS selectors to hide before inspecting")
    ] = None,
    block_banners: BlockBanners = None,
    block_ads: BlockAds = None,
    block_chats: BlockChats = None,
    block_trackers: BlockTrackers = None,
    inject_css: Annotated[
        Optional[str], Field(description="Custom CSS to inject before inspecting")
    ] = None,
    inject_js: Annotated[
        Optional[str], Field(description="Custom JavaScript to execute before inspecting")
    ] = None,
) -> CallToolResult:
    """
    Inspect a web page and get a structured map of all interactive elements, headings,
    forms, links, and images, each with a unique CSS selector. Use this BEFORE run_sequence
    to discover what elements exist on the page and get reliable selectors. Returns text
    (not an image), so it is fast and cheap. Costs 1 API request.
    """
    params = dict(locals())

    if not (url or html):
        return tool_failure('Error: Either "url" or "html" is required.')

    try:
        result = await get_client().inspect(build_payload(params))
    except TOOL_ERRORS as e:
        return _call_failure("Inspect", e)

    return CallToolResult(content=[_text(inspect_report(result, requested_url=url))])


@mcp.tool()
async def list_devices() -> CallToolResult:
    """
    List all available device presets for viewport emulation (e.g. iphone_14_pro,
    macbook_pro_14). Use the returned device names with the viewport_device parameter
    in take_screenshot.
    """
    try:
        result = await get_client().list_devices()
    except TOOL_ERRORS as e:
        return _call_failure("Devices", e)

    return CallToolResult(content=[_text(device_listing(result))])


@mcp.tool()
async def check_usage() -> CallToolResult:
    """Check your current PageBolt API usage and plan limits."""
    try:
        result = await get_client().get_usage()
    except TOOL_ERRORS as e:
        return _call_failure("Usage", e)

    return CallToolResult(content=[_text(usage_report(result))])


@mcp.prompt(
    name="capture-page",
    description="Capture a clean screenshot of any URL with sensible defaults. "
    "Optionally inspects the page first.",
)
def capture_page(
    url: Annotated[str, Field(description="The URL to capture")],
    device: Annotated[
        Optional[str],
        Field(description='Device preset, e.g. "iphone_14_pro" or "macbook_pro_14"'),
    ] = None,
    dark_mode: Annotated[
        Optional[Literal["true", "false"]], Field(description="Enable dark mode (default: false)")
    ] = None,
    full_page: Annotated[
        Optional[Literal["true", "false"]],
        Field(description="Capture the full scrollable page (default: false)"),
    ] = None,
) -> str:
    return prompts.capture_page_prompt(url, device, dark_mode, full_page)


@mcp.prompt(
    name="record-demo",
    description="Record a professional demo video of a web page or flow. "
    "Generates a step sequence automatically.",
)
def record_demo(
    url: Annotated[str, Field(description="The starting URL to record")],
    description: Annotated[
        str,
        Field(description='What the demo should show, e.g. "Sign in and explore the dashboard"'),
    ],
    pace: Annotated[
        Optional[PacePreset], Field(description="Video pace preset (default: normal)")
    ] = None,
    format: Annotated[
        Optional[VideoFormat], Field(description="Output format (default: mp4)")
    ] = None,
) -> str:
    return prompts.record_demo_prompt(url, description, pace, format)


@mcp.prompt(
    name="audit-page",
    description="Inspect a page and return a structured analysis of its elements, forms, "
    "links, and interactive components.",
)
def audit_page(url: Annotated[str, Field(description="The URL to audit")]) -> str:
    return prompts.audit_page_prompt(url)


@mcp.resource(
    DOCS_URI,
    name="api-docs",
    description="Complete PageBolt API reference with all endpoints, parameters, examples, "
    "and plan limits. Read this for detailed documentation beyond tool descriptions.",
    mime_type="text/plain",
)
async def api_docs() -> str:
    """Serve the PageBolt API reference, falling back to a pointer to the online docs."""
    try:
        return await get_client().fetch_docs()
    except httpx.HTTPError as e:
        logger.info(f"API docs unavailable, serving fallback: {e}")
        return DOCS_FALLBACK


def main() -> None:
    """Run the server over stdio with configuration from the environment."""
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    configure(config)
    mcp.run()


if __name__ == "__main__":
    main()
