"""Application service for lesson lookup and static site builds."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import SiteConfig
from .content_loader import load_content
from .layout import render_index_page, render_lesson_page
from .models import Curriculum, Lesson, Phase

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


@dataclass(frozen=True)
class LessonReference:
    """Lesson metadata for list views."""

    lesson_id: str
    title: str
    phase_title: str
    section_count: int
    code_block_count: int
    languages: tuple[str, ...]


@dataclass(frozen=True)
class BuildSummary:
    """Summary emitted by a static site build."""

    output_dir: Path
    pages_written: int
    lessons_written: int
    code_blocks_rendered: int


class LessonCatalog:
    """Holds loaded lessons and curriculum and renders them."""

    def __init__(
        self,
        content_dir: Path | None = None,
        content: tuple[dict[str, Lesson], Curriculum] | None = None,
    ) -> None:
        """Use preloaded `content`, or load from the bundle or `content_dir`."""
        self.lessons, self.curriculum = content if content is not None else load_content(content_dir)

    def get_lesson(self, lesson_id: str) -> Lesson:
        """Return one lesson by id, raising KeyError if unknown."""
        return self.lessons[lesson_id.strip().strip("/")]

    def list_phases(self) -> list[Phase]:
        """Return curriculum phases in navigation order."""
        return list(self.curriculum.phases)

    def ordered_lessons(self) -> list[Lesson]:
        """Curriculum lessons in navigation order, then unlisted lessons by id."""
        listed = list(self.curriculum.lesson_ids)
        unlisted = sorted(set(self.lessons) - set(listed))
        return [self.lessons[lesson_id] for lesson_id in listed + unlisted]

    def list_lesson_references(self) -> list[LessonReference]:
        """Return list-view metadata for every lesson."""
        references: list[LessonReference] = []
        for lesson in self.ordered_lessons():
            phase = self.curriculum.phase_for(lesson.id)
            references.append(
                LessonReference(
                    lesson_id=lesson.id,
                    title=lesson.title,
                    phase_title=phase.title if phase is not None else "",
                    section_count=len(lesson.sections),
                    code_block_count=len(lesson.code_blocks),
                    languages=lesson.languages,
                )
            )
        return references

    def render_lesson(self, lesson_id: str, config: SiteConfig | None = None) -> str:
        """Render one lesson page as HTML."""
        return render_lesson_page(self.get_lesson(lesson_id), self.curriculum, self.lessons, config)

    def build_site(self, output_dir: Path | str, config: SiteConfig | None = None) -> BuildSummary:
        """Write the index page and one page per lesson under `output_dir`."""
        config = config or SiteConfig()
        root = Path(output_dir)
        root.mkdir(parents=True, exist_ok=True)

        _write_page(root / INDEX_FILE, render_index_page(self.curriculum, self.lessons, config))
        code_blocks = 0
        for lesson in self.ordered_lessons():
            page = render_lesson_page(lesson, self.curriculum, self.lessons, config)
            _write_page(root / "lessons" / Path(*lesson.id.split("/")) / INDEX_FILE, page)
            code_blocks += len(lesson.code_blocks)

        summary = BuildSummary(
            output_dir=root,
            pages_written=len(self.lessons) + 1,
            lessons_written=len(self.lessons),
            code_blocks_rendered=code_blocks,
        )
        logger.info("Built %d pages into %s", summary.pages_written, root)
        return summary


def _write_page(path: Path, html: str) -> None:
    """Write one rendered page, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.debug("Wrote %s", path)
