"""SVG placeholder images for development runs without image quota."""

import base64
import html

_MAX_INSTRUCTION_CHARS = 200

_SVG_TEMPLATE = """<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600" viewBox="0 0 800 600">
  <defs>
    <linearGradient id="bg" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:#f0f9ff;stop-opacity:1" />
      <stop offset="100%" style="stop-color:#e0f2fe;stop-opacity:1" />
    </linearGradient>
  </defs>
  <rect width="100%" height="100%" fill="url(#bg)"/>
  <rect x="20" y="20" width="760" height="560" rx="16" fill="white" stroke="#94a3b8" stroke-width="2" stroke-dasharray="8,4"/>
  <text x="400" y="80" text-anchor="middle" font-family="system-ui, sans-serif" font-size="24" font-weight="bold" fill="#0369a1">{title}</text>
  <text x="400" y="120" text-anchor="middle" font-family="system-ui, sans-serif" font-size="14" fill="#64748b">placeholder image</text>
  <line x1="60" y1="150" x2="740" y2="150" stroke="#e2e8f0" stroke-width="1"/>
  <text x="60" y="180" font-family="system-ui, sans-serif" font-size="14" font-weight="600" fill="#334155">Prompt:</text>
  <foreignObject x="60" y="200" width="680" height="340">
    <div xmlns="http://www.w3.org/1999/xhtml" style="font-family: monospace; font-size: 12px; color: #475569; word-wrap: break-word; white-space: pre-wrap; line-height: 1.5; padding: 12px; background: #f8fafc; border-radius: 8px; border: 1px solid #e2e8f0;">{instruction}</div>
  </foreignObject>
</svg>"""


def render_placeholder_svg(instruction: str, title: str = "NoteDraw") -> str:
    """Render the instruction into an SVG card and return it as a data URI."""
    if len(instruction) > _MAX_INSTRUCTION_CHARS:
        instruction = instruction[:_MAX_INSTRUCTION_CHARS] + "..."
    svg = _SVG_TEMPLATE.format(
        title=html.escape(title),
        instruction=html.escape(instruction),
    )
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
