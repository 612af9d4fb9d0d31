"""
PageBolt MCP - web capture tools for AI assistants.

This package exposes the PageBolt HTTP API over the Model Context Protocol:
- Screenshots of URLs, HTML or Markdown
- PDF generation and Open Graph images
- Multi-step browser sequences and video recordings
- Page inspection with CSS selectors
"""

__version__ = "1.3.0"
