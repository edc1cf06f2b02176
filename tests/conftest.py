from __future__ import annotations

import io
import json
import logging
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rich.console import Console  # noqa: E402


def lesson_payload(lesson_id: str = "sample", **overrides: Any) -> dict[str, Any]:
    """Minimal valid lesson JSON payload."""
    payload: dict[str, Any] = {
        "id": lesson_id,
        "title": f"Title {lesson_id}",
        "description": f"About {lesson_id}",
        "sections": [
            {
                "heading": "Basics",
                "paragraphs": ["Intro paragraph."],
                "bullets": ["First point"],
                "code_blocks": [
                    {"title": f"SQL: {lesson_id}", "language": "sql", "code": "SELECT 1;"},
                ],
            }
        ],
    }
    payload.update(overrides)
    return payload


WriteContent = Callable[..., Path]


@pytest.fixture
def write_content(tmp_path: Path) -> WriteContent:
    """Write lesson payloads and an optional curriculum into a content directory."""

    def write(lessons: list[dict[str, Any]], curriculum: dict[str, Any] | None = None) -> Path:
        root = tmp_path / "content"
        lesson_dir = root / "lessons"
        lesson_dir.mkdir(parents=True, exist_ok=True)
        for index, payload in enumerate(lessons):
            name = str(payload.get("id", f"lesson-{index}")).replace("/", "__")
            (lesson_dir / f"{index:02d}-{name}.json").write_text(json.dumps(payload), encoding="utf-8")
        if curriculum is not None:
            (root / "curriculum.json").write_text(json.dumps(curriculum), encoding="utf-8")
        return root

    return write


@pytest.fixture
def console() -> Console:
    """Plain-text console writing into a buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


def console_output(console: Console) -> str:
    """Return everything printed to a buffer-backed console."""
    file = console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()


@pytest.fixture(autouse=True)
def _restore_package_log_level() -> Iterator[None]:
    """Undo log level changes made by CLI runs."""
    logger = logging.getLogger("pglearn")
    level = logger.level
    yield
    logger.setLevel(level)
