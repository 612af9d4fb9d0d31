"""Pydantic request/response models for the PageBolt API."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ImageFormat = Literal["png", "jpeg", "webp"]
WaitUntil = Literal["load", "domcontentloaded", "networkidle0", "networkidle2"]
VideoFormat = Literal["mp4", "webm", "gif"]
PacePreset = Literal["fast", "normal", "slow", "dramatic", "cinematic"]

Number = Union[int, float]

# Wire names that the camelCase generator gets wrong.
WIRE_NAME_OVERRIDES = {"bypass_csp": "bypassCSP"}


class RequestModel(BaseModel):
    """Base for nested request shapes: snake_case in, camelCase on the wire."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class Clip(RequestModel):
    x: Number
    y: Number
    width: Number
    height: Number


class Geolocation(RequestModel):
    latitude: Number
    longitude: Number
    accuracy: Optional[Number] = None


class Cookie(RequestModel):
    name: str
    value: str
    domain: Optional[str] = None


class Viewport(RequestModel):
    width: Optional[int] = Field(None, ge=320, le=3840, description="Viewport width (default: 1280)")
    height: Optional[int] = Field(None, ge=200, le=2160, description="Viewport height (default: 720)")


class VideoStep(RequestModel):
    """A browser action recorded as part of a video."""

    action: Literal[
        "navigate", "click", "fill", "select", "hover", "scroll", "wait", "wait_for", "evaluate"
    ] = Field(
        ...,
        description="The action to perform (no screenshot/pdf: the whole sequence is recorded as video)",
    )
    url: Optional[str] = Field(None, description="URL to navigate to (for navigate action)")
    selector: Optional[str] = Field(None, description="CSS selector for the target element")
    value: Optional[str] = Field(None, description="Value to type or select")
    ms: Optional[int] = Field(None, ge=0, le=10000, description="Milliseconds to wait (for wait action)")
    timeout: Optional[int] = Field(
        None, ge=0, le=15000, description="Timeout in ms for wait_for (default: 10000)"
    )
    x: Optional[float] = Field(None, description="Horizontal scroll position")
    y: Optional[float] = Field(None, description="Vertical scroll position")
    script: Optional[str] = Field(
        None, max_length=5000, description="JavaScript to execute in page context (for evaluate action)"
    )


class SequenceStep(VideoStep):
    """A browser action, optionally producing a screenshot or PDF output."""

    action: Literal[
        "navigate",
        "click",
        "fill",
        "select",
        "hover",
        "scroll",
        "wait",
        "wait_for",
        "evaluate",
        "screenshot",
        "pdf",
    ] = Field(..., description="The action to perform")
    name: Optional[str] = Field(None, description="Name for the output (for screenshot/pdf actions)")
    format: Optional[str] = Field(
        None, description="Image format: png, jpeg, webp (screenshot) or A4, Letter (pdf)"
    )
    full_page: Optional[bool] = Field(
        None, description="Capture full scrollable page (for screenshot action)"
    )
    quality: Optional[int] = Field(
        None, ge=1, le=100, description="JPEG/WebP quality (for screenshot action)"
    )
    landscape: Optional[bool] = Field(None, description="Landscape orientation (for pdf action)")
    print_background: Optional[bool] = Field(
        None, description="Include CSS backgrounds (for pdf action)"
    )
    margin: Optional[str] = Field(None, description="CSS margin for all sides (for pdf action)")
    scale: Optional[float] = Field(None, ge=0.1, le=2, description="Rendering scale (for pdf action)")


class Cursor(RequestModel):
    visible: Optional[bool] = Field(None, description="Show cursor overlay (default: true)")
    style: Optional[Literal["highlight", "circle", "spotlight", "dot"]] = Field(
        None, description="Cursor style (default: highlight)"
    )
    color: Optional[str] = Field(None, description='Cursor color as hex, e.g. "#3B82F6" (default: blue)')
    size: Optional[int] = Field(None, ge=8, le=60, description="Cursor size in pixels (default: 20)")
    smoothing: Optional[bool] = Field(
        None, description="Smooth animated cursor movement (default: true)"
    )


class Zoom(RequestModel):
    enabled: Optional[bool] = Field(None, description="Auto-zoom on clicks (default: true)")
    level: Optional[float] = Field(None, ge=1.5, le=4, description="Zoom magnification (default: 2.0)")
    duration: Optional[int] = Field(
        None, ge=200, le=2000, description="Zoom animation duration in ms (default: 600)"
    )


class ClickEffect(RequestModel):
    enabled: Optional[bool] = Field(None, description="Show click ripple effects (default: true)")
    style: Optional[Literal["ripple", "pulse", "ring"]] = Field(
        None, description="Click effect style (default: ripple)"
    )
    color: Optional[str] = Field(None, description="Click effect color as hex")


def wire_name(name: str) -> str:
    """Map a snake_case parameter name to the API's camelCase key."""
    return WIRE_NAME_OVERRIDES.get(name) or to_camel(name)


def _to_wire(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_to_wire(item) for item in value]
    return value


def build_payload(params: Dict[str, Any], exclude: tuple = ()) -> Dict[str, Any]:
    """
    Build an API request body from tool parameters.

    Keys are converted to camelCase and ``None`` values dropped. Only the
    top-level keys are renamed; free-form mappings such as ``headers`` are
    sent as given.
    """
    return {
        wire_name(key): _to_wire(value)
        for key, value in params.items()
        if value is not None and key not in exclude
    }


class Envelope(BaseModel):
    """Base for API responses. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class CaptureResult(Envelope):
    data: str
    size_bytes: Optional[Number] = None
    duration_ms: Optional[Number] = None
    metadata: Optional[Dict[str, Any]] = None


class SequenceOutput(Envelope):
    type: str
    name: Optional[str] = None
    format: Optional[str] = None
    data: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[Number] = None
    step_index: Optional[int] = None


class StepResult(Envelope):
    step_index: Optional[int] = None
    action: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None


class SequenceUsage(Envelope):
    outputs_charged: Optional[int] = None
    remaining: Optional[int] = None


class SequenceResult(Envelope):
    outputs: List[SequenceOutput] = Field(default_factory=list)
    step_results: List[StepResult] = Field(default_factory=list)
    steps_completed: Optional[int] = None
    total_steps: Optional[int] = None
    total_duration_ms: Optional[Number] = None
    usage: SequenceUsage = Field(default_factory=SequenceUsage)

    @property
    def failed_steps(self) -> List[StepResult]:
        return [step for step in self.step_results if step.status == "error"]


class VideoUsage(Envelope):
    video_cost: Optional[int] = None
    remaining: Optional[int] = None


class VideoResult(CaptureResult):
    format: Optional[str] = None
    frames: Optional[int] = None
    steps_completed: Optional[int] = None
    total_steps: Optional[int] = None
    usage: VideoUsage = Field(default_factory=VideoUsage)


class PageMetadata(Envelope):
    description: Optional[str] = None
    lang: Optional[str] = None
    http_status_code: Optional[int] = Field(None, alias="httpStatusCode")


class Heading(Envelope):
    level: Optional[int] = None
    text: Optional[str] = None
    selector: Optional[str] = None


class PageElement(Envelope):
    tag: Optional[str] = None
    text: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)
    selector: Optional[str] = None


class PageForm(Envelope):
    selector: Optional[str] = None
    method: Optional[str] = None
    action: Optional[str] = None
    fields: List[Any] = Field(default_factory=list)


class PageLink(Envelope):
    text: Optional[str] = None
    href: Optional[str] = None
    selector: Optional[str] = None


class PageImage(Envelope):
    alt: Optional[str] = None
    src: Optional[str] = None
    selector: Optional[str] = None


class InspectResult(Envelope):
    title: Optional[str] = None
    url: Optional[str] = None
    metadata: Optional[PageMetadata] = None
    headings: List[Heading] = Field(default_factory=list)
    elements: List[PageElement] = Field(default_factory=list)
    forms: List[PageForm] = Field(default_factory=list)
    links: List[PageLink] = Field(default_factory=list)
    images: List[PageImage] = Field(default_factory=list)
    duration_ms: Optional[Number] = None


class DeviceViewport(Envelope):
    width: int
    height: int
    device_scale_factor: Number = Field(1, alias="deviceScaleFactor")


class Device(Envelope):
    name: str
    viewport: DeviceViewport
    is_mobile: bool = Field(False, alias="isMobile")
    has_touch: bool = Field(False, alias="hasTouch")


class DevicesResult(Envelope):
    devices: List[Device] = Field(default_factory=list)


class UsageCounters(Envelope):
    current: int = 0
    limit: int = 0
    remaining: int = 0


class UsageResult(Envelope):
    plan: str = "unknown"
    usage: UsageCounters = Field(default_factory=UsageCounters)

    @property
    def percent_used(self) -> int:
        if self.usage.limit <= 0:
            return 0
        return int(self.usage.current * 100 / self.usage.limit + 0.5)
