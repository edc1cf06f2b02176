"""Load declarative lesson content from bundled JSON resources."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

from .models import SUPPORTED_LANGUAGES, CodeBlock, Curriculum, Lesson, Phase, Section

logger = logging.getLogger(__name__)

CONTENT_PACKAGE = "pglearn.content"
LESSONS_DIR = "lessons"
CURRICULUM_FILE = "curriculum.json"
DEFAULT_SITE_TITLE = "PostgreSQL Learning"

_SLUG_PART = r"[a-z0-9]+(?:-[a-z0-9]+)*"
LESSON_ID_PATTERN = re.compile(rf"^{_SLUG_PART}(?:/{_SLUG_PART})*$")


class ContentError(ValueError):
    """Raised when bundled or user-supplied lesson content is malformed."""


def _required_text(raw: dict[str, Any], key: str, where: str) -> str:
    """Return a stripped, non-empty string field or raise."""
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ContentError(f"{where}: '{key}' must be a non-empty string.")
    return value.strip()


def _text_list(raw: dict[str, Any], key: str, where: str) -> tuple[str, ...]:
    """Return a list-of-strings field with blank items dropped."""
    values = raw.get(key, [])
    if not isinstance(values, list):
        raise ContentError(f"{where}: '{key}' must be a list.")
    return tuple(str(value).strip() for value in values if str(value).strip())


def _require_object(raw: Any, where: str) -> dict[str, Any]:
    """Return `raw` if it is a JSON object."""
    if not isinstance(raw, dict):
        raise ContentError(f"{where}: expected a JSON object.")
    return raw


def _code_block_from_dict(where: str, raw: Any) -> CodeBlock:
    """Build a code block from raw JSON content."""
    raw = _require_object(raw, where)
    title = _required_text(raw, "title", where)
    block_where = f"{where}, code block '{title}'"
    language = str(raw.get("language", "")).strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        supported = ", ".join(sorted(SUPPORTED_LANGUAGES))
        raise ContentError(f"{block_where}: unsupported language '{language}' (expected one of {supported}).")

    code = raw.get("code")
    if isinstance(code, list):
        code = "\n".join(str(line) for line in code)
    if not isinstance(code, str) or not code.strip():
        raise ContentError(f"{block_where}: 'code' must be a non-empty string.")
    return CodeBlock(title=title, language=language, code=code.rstrip("\n"))


def _section_from_dict(where: str, raw: Any) -> Section:
    """Build a section from raw JSON content."""
    raw = _require_object(raw, where)
    heading = str(raw.get("heading", "")).strip()
    section_where = f"{where}, section '{heading}'" if heading else f"{where}, lead section"
    blocks = raw.get("code_blocks", [])
    if not isinstance(blocks, list):
        raise ContentError(f"{section_where}: 'code_blocks' must be a list.")
    return Section(
        heading=heading,
        paragraphs=_text_list(raw, "paragraphs", section_where),
        bullets=_text_list(raw, "bullets", section_where),
        code_blocks=tuple(_code_block_from_dict(section_where, item) for item in blocks),
    )


def _lesson_from_dict(raw: Any, source: str) -> Lesson:
    """Build a lesson from raw JSON content."""
    raw = _require_object(raw, source)
    lesson_id = _required_text(raw, "id", source)
    if not LESSON_ID_PATTERN.match(lesson_id):
        raise ContentError(f"{source}: invalid lesson id '{lesson_id}'.")
    where = f"lesson '{lesson_id}'"
    sections = raw.get("sections", [])
    if not isinstance(sections, list):
        raise ContentError(f"{where}: 'sections' must be a list.")
    return Lesson(
        id=lesson_id,
        title=_required_text(raw, "title", where),
        description=_required_text(raw, "description", where),
        sections=tuple(_section_from_dict(where, item) for item in sections),
    )


def _curriculum_from_dict(raw: Any, lessons: dict[str, Lesson], source: str) -> Curriculum:
    """Build the curriculum and check it against loaded lessons."""
    raw = _require_object(raw, source)
    site_title = str(raw.get("site_title", "")).strip() or DEFAULT_SITE_TITLE
    raw_phases = raw.get("phases", [])
    if not isinstance(raw_phases, list):
        raise ContentError(f"{source}: 'phases' must be a list.")

    phases: list[Phase] = []
    phase_ids: set[str] = set()
    placed: dict[str, str] = {}
    for item in raw_phases:
        item = _require_object(item, source)
        phase_id = _required_text(item, "id", source)
        if phase_id in phase_ids:
            raise ContentError(f"{source}: duplicate phase id '{phase_id}'.")
        phase_ids.add(phase_id)
        lesson_ids = _text_list(item, "lessons", f"{source}, phase '{phase_id}'")
        for lesson_id in lesson_ids:
            if lesson_id not in lessons:
                raise ContentError(f"Phase '{phase_id}' lists unknown lesson '{lesson_id}'.")
            previous = placed.get(lesson_id)
            if previous is not None:
                raise ContentError(f"Lesson '{lesson_id}' is listed twice (in {previous} and {phase_id}).")
            placed[lesson_id] = phase_id
        phases.append(Phase(id=phase_id, title=_required_text(item, "title", source), lesson_ids=lesson_ids))

    for lesson_id in sorted(set(lessons) - set(placed)):
        logger.warning("Lesson '%s' is not listed in any curriculum phase", lesson_id)
    return Curriculum(site_title=site_title, phases=tuple(phases))


def _read_json(entry: Traversable) -> Any:
    """Parse one JSON content file."""
    try:
        return json.loads(entry.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise ContentError(f"{entry.name}: invalid JSON ({exc.msg} at line {exc.lineno}).") from exc
    except UnicodeDecodeError as exc:
        raise ContentError(f"{entry.name}: not valid UTF-8 (byte {exc.start}).") from exc


def _lessons_from_entries(entries: Iterable[Traversable]) -> dict[str, Lesson]:
    """Load every `*.json` entry as a lesson, rejecting duplicate ids."""
    lessons: dict[str, Lesson] = {}
    for entry in sorted(entries, key=lambda item: item.name):
        if not entry.name.endswith(".json"):
            continue
        lesson = _lesson_from_dict(_read_json(entry), entry.name)
        if lesson.id in lessons:
            raise ContentError(f"Duplicate lesson id: {lesson.id}")
        lessons[lesson.id] = lesson
        logger.debug("Loaded lesson %s from %s", lesson.id, entry.name)
    return lessons


def load_lessons() -> dict[str, Lesson]:
    """Load bundled lessons."""
    return _lessons_from_entries(resources.files(CONTENT_PACKAGE).joinpath(LESSONS_DIR).iterdir())


def load_lessons_from_dir(path: Path) -> dict[str, Lesson]:
    """Load lessons from a directory of JSON files."""
    if not path.is_dir():
        raise ContentError(f"Lesson directory not found: {path}")
    return _lessons_from_entries(path.iterdir())


def load_curriculum(lessons: dict[str, Lesson]) -> Curriculum:
    """Load the bundled curriculum."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(CURRICULUM_FILE)
    return _curriculum_from_dict(_read_json(entry), lessons, CURRICULUM_FILE)


def load_curriculum_from_file(path: Path, lessons: dict[str, Lesson]) -> Curriculum:
    """Load a curriculum file; a missing file yields an empty curriculum."""
    if not path.is_file():
        logger.info("No curriculum at %s, navigation will be empty", path)
        return _curriculum_from_dict({}, lessons, path.name)
    return _curriculum_from_dict(_read_json(path), lessons, path.name)


def load_content(content_dir: Path | None = None) -> tuple[dict[str, Lesson], Curriculum]:
    """Load lessons and curriculum from the bundle or from `content_dir`."""
    if content_dir is None:
        lessons = load_lessons()
        curriculum = load_curriculum(lessons)
    else:
        lessons = load_lessons_from_dir(content_dir / LESSONS_DIR)
        curriculum = load_curriculum_from_file(content_dir / CURRICULUM_FILE, lessons)
    logger.info("Loaded %d lessons in %d phases", len(lessons), len(curriculum.phases))
    return lessons, curriculum
