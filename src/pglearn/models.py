"""Core domain models for static lesson content."""

from __future__ import annotations

from dataclasses import dataclass

SUPPORTED_LANGUAGES: frozenset[str] = frozenset(
    {"sql", "prisma", "typescript", "bash", "ini", "javascript", "text"}
)


@dataclass(frozen=True)
class CodeBlock:
    """One titled, language-tagged code sample."""

    title: str
    language: str
    code: str


@dataclass(frozen=True)
class Section:
    """Headed group of prose and code samples inside a lesson."""

    heading: str
    paragraphs: tuple[str, ...]
    bullets: tuple[str, ...]
    code_blocks: tuple[CodeBlock, ...]


@dataclass(frozen=True)
class Lesson:
    """One topic page."""

    id: str
    title: str
    description: str
    sections: tuple[Section, ...]

    @property
    def code_blocks(self) -> tuple[CodeBlock, ...]:
        """All code samples in document order."""
        return tuple(block for section in self.sections for block in section.code_blocks)

    @property
    def languages(self) -> tuple[str, ...]:
        """Distinct code sample languages, sorted."""
        return tuple(sorted({block.language for block in self.code_blocks}))


@dataclass(frozen=True)
class Phase:
    """Titled group of lessons in the navigation."""

    id: str
    title: str
    lesson_ids: tuple[str, ...]


@dataclass(frozen=True)
class Curriculum:
    """Ordered phases plus the site title."""

    site_title: str
    phases: tuple[Phase, ...]

    def phase_for(self, lesson_id: str) -> Phase | None:
        """Return the phase listing a lesson, if any."""
        for phase in self.phases:
            if lesson_id in phase.lesson_ids:
                return phase
        return None

    @property
    def lesson_ids(self) -> tuple[str, ...]:
        """Every listed lesson id in navigation order."""
        return tuple(lesson_id for phase in self.phases for lesson_id in phase.lesson_ids)
