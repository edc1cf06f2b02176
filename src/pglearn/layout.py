"""Page chrome shared by every lesson: navigation sidebar plus content container."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from rich.console import Group, RenderableType
from rich.markup import escape as escape_markup
from rich.padding import Padding
from rich.rule import Rule
from rich.text import Text

from .code_block import DEFAULT_THEME, code_block_renderable, render_code_block_html
from .config import SiteConfig
from .models import Curriculum, Lesson


@dataclass(frozen=True)
class NavLink:
    """One sidebar entry."""

    lesson_id: str
    title: str
    href: str
    active: bool


@dataclass(frozen=True)
class NavPhase:
    """Sidebar group for one curriculum phase."""

    id: str
    title: str
    links: tuple[NavLink, ...]


@lru_cache(maxsize=1)
def template_environment() -> Environment:
    """Return the Jinja2 environment for bundled page templates."""
    env = Environment(
        loader=PackageLoader("pglearn", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["code_block"] = render_code_block_html
    return env


def lesson_href(lesson_id: str, base_path: str = "/") -> str:
    """Site-relative URL of a lesson page."""
    return f"{base_path}lessons/{lesson_id}/"


def site_title(curriculum: Curriculum, config: SiteConfig) -> str:
    """Configured site title, falling back to the curriculum's."""
    return config.site_title.strip() or curriculum.site_title


def build_navigation(
    curriculum: Curriculum,
    lessons: dict[str, Lesson],
    base_path: str = "/",
    active_id: str | None = None,
) -> tuple[NavPhase, ...]:
    """Build sidebar groups, marking `active_id` as the current page."""
    return tuple(
        NavPhase(
            id=phase.id,
            title=phase.title,
            links=tuple(
                NavLink(
                    lesson_id=lesson_id,
                    title=lessons[lesson_id].title,
                    href=lesson_href(lesson_id, base_path),
                    active=lesson_id == active_id,
                )
                for lesson_id in phase.lesson_ids
            ),
        )
        for phase in curriculum.phases
    )


def render_lesson_page(
    lesson: Lesson,
    curriculum: Curriculum,
    lessons: dict[str, Lesson],
    config: SiteConfig | None = None,
) -> str:
    """Render one lesson as a complete HTML document."""
    config = config or SiteConfig()
    template = template_environment().get_template("lesson.html")
    return template.render(
        lesson=lesson,
        site_title=site_title(curriculum, config),
        page_title=f"{lesson.title} - {site_title(curriculum, config)}",
        description=lesson.description,
        navigation=build_navigation(curriculum, lessons, config.base_path, lesson.id),
        base_path=config.base_path,
        theme=config.theme,
    )


def render_index_page(
    curriculum: Curriculum,
    lessons: dict[str, Lesson],
    config: SiteConfig | None = None,
) -> str:
    """Render the home page listing every phase and lesson."""
    config = config or SiteConfig()
    title = site_title(curriculum, config)
    template = template_environment().get_template("index.html")
    return template.render(
        site_title=title,
        page_title=title,
        description=f"{len(lessons)} lessons on PostgreSQL and Prisma",
        navigation=build_navigation(curriculum, lessons, config.base_path),
        lessons=lessons,
        base_path=config.base_path,
    )


def lesson_renderable(lesson: Lesson, theme: str = DEFAULT_THEME) -> RenderableType:
    """Render one lesson for the terminal."""
    parts: list[RenderableType] = [
        Rule(f"[bold cyan]{escape_markup(lesson.title)}[/bold cyan]"),
        Text(lesson.description, style="italic"),
    ]
    for section in lesson.sections:
        if section.heading:
            parts.append(Text(f"\n{section.heading}", style="bold underline"))
        for paragraph in section.paragraphs:
            parts.append(Padding(Text(paragraph), (1, 0, 0, 0)))
        for bullet in section.bullets:
            parts.append(Text(f"  • {bullet}"))
        for block in section.code_blocks:
            parts.append(code_block_renderable(block, theme))
    return Group(*parts)
