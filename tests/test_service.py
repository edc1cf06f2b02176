from pathlib import Path

from conftest import lesson_payload

from pglearn.config import SiteConfig
from pglearn.content_loader import load_content
from pglearn.service import LessonCatalog


def test_catalog_loads_bundled_content() -> None:
    catalog = LessonCatalog()
    assert catalog.get_lesson("having").title == "HAVING"
    assert catalog.get_lesson(" /ctes/ ").id == "ctes"
    assert catalog.list_phases()[0].title == "Phase 1: Foundations & Setup"


def test_get_lesson_unknown_raises_key_error() -> None:
    catalog = LessonCatalog()
    try:
        catalog.get_lesson("does-not-exist")
        raise AssertionError("Expected KeyError for an unknown lesson.")
    except KeyError as exc:
        assert "does-not-exist" in str(exc)


def test_lesson_references_follow_curriculum_then_unlisted(write_content) -> None:
    root = write_content(
        [lesson_payload("z-first"), lesson_payload("b-orphan"), lesson_payload("a-second")],
        {"phases": [{"id": "p", "title": "Phase P", "lessons": ["z-first", "a-second"]}]},
    )
    catalog = LessonCatalog(content_dir=root)

    references = catalog.list_lesson_references()
    assert [item.lesson_id for item in references] == ["z-first", "a-second", "b-orphan"]
    assert references[0].phase_title == "Phase P"
    assert references[2].phase_title == ""
    assert references[0].section_count == 1
    assert references[0].code_block_count == 1
    assert references[0].languages == ("sql",)


def test_catalog_accepts_preloaded_content() -> None:
    lessons, curriculum = load_content()
    catalog = LessonCatalog(content=(lessons, curriculum))
    assert catalog.lessons is lessons
    assert catalog.curriculum is curriculum


def test_render_lesson_returns_html() -> None:
    html = LessonCatalog().render_lesson("pg-dump")
    assert html.startswith("<!DOCTYPE html>")
    assert "Shell: Parallel Dump" in html


def test_build_site_writes_index_and_lesson_pages(tmp_path: Path) -> None:
    catalog = LessonCatalog()
    summary = catalog.build_site(tmp_path / "site")

    assert summary.output_dir == tmp_path / "site"
    assert summary.lessons_written == len(catalog.lessons)
    assert summary.pages_written == len(catalog.lessons) + 1
    assert summary.code_blocks_rendered == sum(len(lesson.code_blocks) for lesson in catalog.lessons.values())
    assert (tmp_path / "site" / "index.html").is_file()
    for lesson_id in catalog.lessons:
        page = tmp_path / "site" / "lessons" / lesson_id / "index.html"
        assert page.is_file(), lesson_id
        assert catalog.lessons[lesson_id].title in page.read_text(encoding="utf-8")


def test_build_site_nested_ids_and_base_path(write_content, tmp_path: Path) -> None:
    root = write_content(
        [lesson_payload("practical-queries/joins")],
        {"phases": [{"id": "p", "title": "P", "lessons": ["practical-queries/joins"]}]},
    )
    catalog = LessonCatalog(content_dir=root)
    out = tmp_path / "out"

    catalog.build_site(out, SiteConfig(base_path="/learn/"))

    page = out / "lessons" / "practical-queries" / "joins" / "index.html"
    assert page.is_file()
    assert 'href="/learn/lessons/practical-queries/joins/"' in (out / "index.html").read_text(encoding="utf-8")


def test_build_site_is_repeatable(tmp_path: Path) -> None:
    catalog = LessonCatalog()
    catalog.build_site(tmp_path / "one")
    catalog.build_site(tmp_path / "two")
    for lesson_id in catalog.lessons:
        first = (tmp_path / "one" / "lessons" / lesson_id / "index.html").read_bytes()
        second = (tmp_path / "two" / "lessons" / lesson_id / "index.html").read_bytes()
        assert first == second
