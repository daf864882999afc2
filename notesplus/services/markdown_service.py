from __future__ import annotations
import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Tuple

import markdown2
from pygments.formatters import HtmlFormatter

from notesplus.ui.theme import LIGHT_THEME, ThemeColors

BLANK_PLACEHOLDER = (
    "<span style='display: inline-block; min-height: 1.2em;'>&nbsp;</span>"
)
MARKDOWN_EXTRAS = [
    "tables",
    "strike",
    "task_list",
    "fenced-code-blocks",
    "link-patterns",
]
# Bare URLs become links; explicit markdown links are left to markdown2
AUTOLINK_PATTERN = re.compile(
    r"(?<![\"'(=<])\b((?:https?|ftp)://[^\s<>\"')\]]+|www\.[A-Za-z0-9-]+\.[^\s<>\"')\]]+)"
)
BLOCK_OPENERS: Tuple[str, ...] = ("<h", "<ul", "<ol", "<table", "<blockquote", "<p>")
_TAG_RE = re.compile(r"<[^>]+>")


def _autolink_href(match: re.Match) -> str:
    url = match.group(1)
    return url if "://" in url else f"http://{url}"


@dataclass(frozen=True)
class ParagraphUnwrapPolicy:
    """Decides when a lone ``<p>`` wrapper is stripped from a rendered line.

    Modes:
    - ``strict``: unwrap when the inner fragment has no block-level openers and
      at most ``max_inline_tags`` tags.
    - ``single-line``: unwrap whenever the rendered HTML has no newline.
    - ``never``: keep every paragraph.
    """

    mode: str = "strict"
    block_openers: Tuple[str, ...] = BLOCK_OPENERS
    max_inline_tags: int = 1

    def apply(self, html: str) -> str:
        if self.mode == "never":
            return html
        if not (html.startswith("<p>") and html.endswith("</p>")):
            return html
        if self.mode == "single-line":
            return html[3:-4] if "\n" not in html else html
        inner = html[3:-4].strip()
        if any(marker in inner for marker in self.block_openers):
            return html
        if len(_TAG_RE.findall(inner)) > self.max_inline_tags:
            return html
        return inner


@dataclass
class MarkdownService:
    """Markdown to HTML conversion for single logical lines.

    Conversion itself is delegated to markdown2; this service adds the
    per-line post-processing and the page template handed to the display.
    """

    theme: ThemeColors = LIGHT_THEME
    unwrap_policy: ParagraphUnwrapPolicy = field(default_factory=ParagraphUnwrapPolicy)

    @cached_property
    def _converter(self) -> markdown2.Markdown:
        return markdown2.Markdown(
            extras=list(MARKDOWN_EXTRAS),
            link_patterns=[(AUTOLINK_PATTERN, _autolink_href)],
        )

    def to_html(self, markdown_text: str) -> str:
        """Plain conversion of ``markdown_text`` to an HTML fragment."""
        return str(self._converter.convert(markdown_text)).strip()

    def render_line(self, raw: str) -> str:
        """Render one logical line, never returning an empty fragment."""
        if not raw.strip():
            return BLANK_PLACEHOLDER
        html = self.unwrap_policy.apply(self.to_html(raw))
        if not html or html == "&nbsp;":
            return BLANK_PLACEHOLDER
        return html

    @cached_property
    def style_sheet(self) -> str:
        t = self.theme
        code_font = "'Consolas', 'Monaco', 'Courier New', monospace"
        rules = [
            "body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', "
            "'Helvetica Neue', Arial, sans-serif; font-size: 14px; "
            f"color: {t.foreground}; margin: 0; padding: 3px 6px; "
            f"background-color: {t.background}; line-height: 1.6; }}",
            f"h1, h2, h3, h4, h5, h6 {{ color: {t.heading_fg}; margin: 4px 0; "
            "font-weight: 600; line-height: 1.3; }",
            "h1 { font-size: 24px; } h2 { font-size: 20px; } h3 { font-size: 18px; }",
            "h4 { font-size: 16px; } h5 { font-size: 15px; } h6 { font-size: 14px; }",
            "p { margin: 2px 0; }",
            f"strong, b {{ color: {t.strong_fg}; font-weight: 700; }}",
            f"em, i {{ color: {t.em_fg}; font-style: italic; }}",
            f"code {{ background-color: {t.inline_code_bg}; "
            f"border: 1px solid {t.code_border}; border-radius: 3px; "
            f"padding: 2px 6px; font-family: {code_font}; font-size: 13px; "
            f"color: {t.code_fg}; }}",
            f"pre {{ background-color: {t.code_block_bg}; "
            f"border: 1px solid {t.code_border}; border-radius: 3px; "
            f"padding: 8px 12px; overflow: auto; font-family: {code_font}; "
            f"font-size: 12px; color: {t.code_fg}; margin: 4px 0; "
            "word-break: break-all; }",
            "pre code { background: transparent; border: none; padding: 0; }",
            f"del, s, strike {{ color: {t.strike_fg}; text-decoration: line-through; }}",
            f"mark {{ background-color: {t.mark_bg}; color: {t.code_fg}; "
            "padding: 2px 4px; }",
            f"blockquote {{ background: {t.blockquote_bg}; "
            f"border-left: 4px solid {t.blockquote_border}; color: {t.blockquote_fg}; "
            "margin: 4px 0; padding: 8px 12px; font-style: normal; }",
            "ul, ol { margin: 2px 0; padding-left: 24px; }",
            "li { margin: 2px 0; line-height: 1.5; }",
            f"a {{ color: {t.link_fg}; text-decoration: none; }}",
            "a:hover { text-decoration: underline; }",
            f"hr {{ border: none; border-top: 1px solid {t.rule_fg}; margin: 8px 0; }}",
            "table { border-collapse: collapse; margin: 4px 0; font-size: 13px; }",
            f"td, th {{ border: 1px solid {t.table_border}; padding: 6px 13px; "
            "text-align: left; }",
            f"th {{ background-color: {t.table_header_bg}; font-weight: 600; }}",
            "img { max-width: 100%; height: auto; }",
        ]
        # Token colors for fenced code highlighted by markdown2 via pygments
        rules.append(HtmlFormatter().get_style_defs(".codehilite"))
        return "\n".join(rules)

    def page(self, fragment: str) -> str:
        """Embed ``fragment`` into the styled page template."""
        return (
            f"<html><head><style>{self.style_sheet}</style></head>"
            f"<body>{fragment}</body></html>"
        )
