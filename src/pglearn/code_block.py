"""Syntax-highlighted rendering of code samples for HTML pages and the terminal."""

from __future__ import annotations

import io

from markupsafe import Markup
from rich.console import Console
from rich.markup import escape as escape_markup
from rich.panel import Panel
from rich.style import Style
from rich.syntax import Syntax
from rich.text import Span, Text

from .models import CodeBlock

DEFAULT_THEME = "monokai"
# Wide enough that recorded HTML never wraps a sample line.
HTML_CONSOLE_WIDTH = 400

LEXER_BY_LANGUAGE: dict[str, str] = {
    "sql": "postgresql",
}


def lexer_for(language: str) -> str:
    """Return the Pygments lexer name for a code sample language."""
    return LEXER_BY_LANGUAGE.get(language, language)


def _plain_background(style: Style | str) -> Style | str:
    if isinstance(style, Style) and style.bgcolor is not None:
        return Style.from_color(style.color) + style.without_color
    return style


def _without_background(text: Text) -> Text:
    """Drop background colours so the surrounding `<pre>` shows through."""
    text.style = _plain_background(text.style)
    text.spans = [Span(span.start, span.end, _plain_background(span.style)) for span in text.spans]
    return text


def theme_background(theme: str = DEFAULT_THEME) -> str | None:
    """Hex background colour of a Pygments theme, if it declares one."""
    color = Syntax.get_theme(theme).get_background_style().bgcolor
    if color is None or color.is_default:
        return None
    return color.get_truecolor().hex


def highlight_html(code: str, language: str, theme: str = DEFAULT_THEME) -> str:
    """Highlight `code` into escaped HTML spans with inline styles."""
    console = Console(
        record=True,
        file=io.StringIO(),
        width=HTML_CONSOLE_WIDTH,
        color_system="truecolor",
        force_terminal=True,
    )
    syntax = Syntax(code, lexer_for(language), theme=theme)
    text = _without_background(syntax.highlight(code))
    text.rstrip()
    console.print(text, soft_wrap=True)
    return console.export_html(inline_styles=True, code_format="{code}").rstrip("\n")


def render_code_block_html(block: CodeBlock, theme: str = DEFAULT_THEME) -> Markup:
    """Render one titled code sample as an HTML figure."""
    body = highlight_html(block.code, block.language, theme)
    background = theme_background(theme)
    pre_style = Markup(' style="background: {}"').format(background) if background else ""
    return Markup(
        '<figure class="code-block">'
        "<figcaption>{title}</figcaption>"
        '<pre{pre_style}><code class="language-{language}">{body}</code></pre>'
        "</figure>"
    ).format(title=block.title, language=block.language, pre_style=pre_style, body=Markup(body))


def code_block_renderable(block: CodeBlock, theme: str = DEFAULT_THEME) -> Panel:
    """Render one titled code sample as a terminal panel."""
    return Panel(
        Syntax(block.code, lexer_for(block.language), theme=theme, word_wrap=True),
        title=f"[bold]{escape_markup(block.title)}[/bold] [dim]{block.language}[/dim]",
        title_align="left",
        border_style="blue",
    )

