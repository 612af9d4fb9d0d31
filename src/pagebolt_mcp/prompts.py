"""Server instructions and prompt templates for the PageBolt MCP server."""

from typing import Optional

SERVER_INSTRUCTIONS = """
PageBolt gives you 8 tools for web capture and browser automation. All tools use your API key automatically.

## Tools Overview

| Tool | What it does | Cost |
|------|-------------|------|
| take_screenshot | Capture a URL, HTML, or Markdown as PNG/JPEG/WebP | 1 request |
| generate_pdf | Convert a URL or HTML to PDF, saves to disk | 1 request |
| create_og_image | Generate social card images from templates or custom HTML | 1 request |
| run_sequence | Multi-step browser automation with multiple screenshot/PDF outputs | 1 request per output |
| record_video | Record browser automation as MP4/WebM/GIF with cursor effects | 3 requests |
| inspect_page | Get structured map of page elements with CSS selectors | 1 request |
| list_devices | List 25+ device presets (iPhone, iPad, MacBook, etc.) | 0 (free) |
| check_usage | Check current API usage and plan limits | 0 (free) |

## Key Workflow: Inspect Before You Interact

When building sequences or videos, ALWAYS use inspect_page first to discover reliable CSS selectors:

1. inspect_page: returns buttons, inputs, forms, links, headings with unique selectors
2. run_sequence or record_video: use the selectors from step 1

This avoids guessing selectors like "#submit" when the actual element is "#submitBtn".

## Common Parameters (available on most tools)

- block_banners: true hides cookie consent banners (GDPR popups, OneTrust, CookieBot, etc.)
- block_ads: true blocks advertisements
- block_chats: true blocks live chat widgets (Intercom, Crisp, Drift)
- block_trackers: true blocks analytics trackers (GA, Hotjar, Segment)
- dark_mode: true emulates dark color scheme (prefers-color-scheme: dark)
- viewport_device: "iphone_14_pro" emulates a specific device (use list_devices to see all 25+)

Use block_banners on almost every request to get clean captures. Combine block_ads, block_chats and block_trackers for completely clean screenshots.

## Tips

- For screenshots of pages behind auth: use cookies, headers, or authorization params
- extract_metadata: true on take_screenshot returns title, description, OG tags, HTTP status
- record_video pace presets: "fast" (0.5x), "normal" (1x), "slow" (2x), "dramatic" (3x), "cinematic" (4.5x)
- record_video cursor styles: "highlight", "circle", "spotlight", "dot"
- run_sequence requires at least 1 screenshot or pdf step as output
- record_video does NOT allow screenshot/pdf steps; the whole sequence IS the video
- Max 2 evaluate (JavaScript) steps per sequence/video
- full_page: true on screenshots captures the entire scrollable page
- full_page_scroll: true triggers lazy-loaded images before capture
- generate_pdf and record_video write files; save_to must stay inside the working directory

## Cost Summary

| Action | Cost |
|--------|------|
| Screenshot, PDF, OG image, Inspect | 1 request each |
| Sequence | 1 request per output (screenshot/pdf) |
| Video recording | 3 requests flat |
| list_devices, check_usage | Free |
""".strip()


def capture_page_prompt(
    url: str,
    device: Optional[str] = None,
    dark_mode: Optional[str] = None,
    full_page: Optional[str] = None,
) -> str:
    settings = ["Block banners, ads, chats, and trackers for a clean capture"]
    call_args = [
        f'url: "{url}"',
        "block_banners: true",
        "block_ads: true",
        "block_chats: true",
        "block_trackers: true",
    ]

    if device:
        settings.append(f"Use device preset: {device}")
        call_args.append(f'viewport_device: "{device}"')
    if dark_mode == "true":
        settings.append("Enable dark mode")
        call_args.append("dark_mode: true")
    if full_page == "true":
        settings.append("Capture the full scrollable page")
        call_args.extend(["full_page: true", "full_page_scroll: true"])

    settings.append("Use PNG format")
    settings.append("If the page looks complex or you need to verify elements, run inspect_page first")

    return (
        f"Take a clean screenshot of {url} with these settings:\n"
        + "\n".join(f"- {line}" for line in settings)
        + "\n\nCall take_screenshot with:\n"
        + "\n".join(f"  {arg}" for arg in call_args)
    )


def record_demo_prompt(
    url: str,
    description: str,
    pace: Optional[str] = None,
    format: Optional[str] = None,
) -> str:
    pace = pace or "normal"
    format = format or "mp4"

    return f"""Record a professional demo video. Here's what I need:

**Starting URL:** {url}
**What to demo:** {description}
**Pace:** {pace}
**Format:** {format}

Please follow this workflow:

1. First, call inspect_page on {url} (with block_banners: true) to discover the page structure and get reliable CSS selectors.

2. Based on the inspection results and the description above, plan a sequence of steps (navigate, click, fill, scroll, wait, etc.) that demonstrates the described flow.

3. Call record_video with:
   - The planned steps array
   - format: "{format}"
   - pace: "{pace}"
   - block_banners: true
   - cursor: {{ style: "spotlight", color: "#6366f1" }}
   - click_effect: {{ style: "ripple", color: "#6366f1" }}

Important tips:
- Use selectors from the inspect_page results; never guess selectors
- Add scroll actions between sections to show content naturally
- Use wait_for after navigation to ensure the page loads
- Keep to 15 steps or fewer for best results
- Each video costs 3 API requests"""


def audit_page_prompt(url: str) -> str:
    return f"""Perform a structured audit of {url}.

1. Call inspect_page with:
   - url: "{url}"
   - block_banners: true
   - block_ads: true

2. Analyze the results and provide a clear summary:
   - **Page overview:** Title, description, language, HTTP status
   - **Navigation:** List all nav links with their destinations
   - **Forms:** List all forms with their fields and actions
   - **Interactive elements:** Buttons, dropdowns, toggles with their selectors
   - **Headings:** Document outline (h1-h6 hierarchy)
   - **Images:** Count and list images missing alt text
   - **Potential issues:** Missing form labels, broken links, accessibility concerns

3. If this page will be used for automation (sequence/video), list the most useful CSS selectors the user should know about."""
