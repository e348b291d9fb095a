# tests/unit/test_lesson_catalog.py

import asyncio
from dataclasses import replace

import pytest

from lessonbook.domain.exceptions import FetchFailureError
from lessonbook.domain.models import Lesson, SortKey


# ---------------------
# LOADING
# ---------------------

def test_load_replaces_records_wholesale(loaded_session, fake_api):
    session = loaded_session
    first_a = session.repository.get_by_id("A")

    del fake_api.server["D"]
    fake_api.server["A"].spaces = 9
    asyncio.run(session.catalog.load())

    assert session.repository.get_by_id("A") is not first_a
    assert session.repository.get_by_id("A").spaces == 9
    assert "D" not in session.repository
    assert [lesson.id for lesson in session.catalog.lessons()] == ["A", "B", "C"]


def test_reload_keeps_cart_holds_off_fresh_records(loaded_session):
    session = loaded_session
    session.add_to_cart("A")
    session.add_to_cart("A")

    assert asyncio.run(session.start())

    assert session.repository.get_by_id("A").spaces == 1


def test_reload_clamps_when_server_has_fewer_spaces_than_held(loaded_session, fake_api):
    session = loaded_session
    session.add_to_cart("A")
    session.add_to_cart("A")
    fake_api.server["A"].spaces = 1

    asyncio.run(session.start())

    assert session.repository.get_by_id("A").spaces == 0


def test_failed_load_keeps_previous_records(loaded_session, fake_api):
    session = loaded_session
    fake_api.fail_fetch = True

    with pytest.raises(FetchFailureError):
        asyncio.run(session.catalog.load())

    assert len(session.catalog.lessons()) == 4


def test_start_records_fetch_failure_for_retry(session, fake_api):
    fake_api.fail_fetch = True

    assert asyncio.run(session.start()) is False
    assert isinstance(session.load_error, FetchFailureError)
    assert session.catalog.lessons() == []

    fake_api.fail_fetch = False
    assert asyncio.run(session.start()) is True
    assert session.load_error is None


# ---------------------
# SEARCH PROJECTION
# ---------------------

def test_search_results_keep_local_capacity(loaded_session):
    session = loaded_session
    session.add_to_cart("A")
    server_copy = replace(session.repository.get_by_id("A"), spaces=3)

    results = session.catalog.apply_search_results("math", [server_copy])

    assert results[0] is session.repository.get_by_id("A")
    assert results[0].spaces == 2


def test_search_adds_lessons_unknown_to_catalog(loaded_session):
    session = loaded_session
    extra = Lesson(id="E", subject="Mandarin", location="Hendon", price=50, spaces=1)

    session.catalog.apply_search_results("man", [extra])

    assert session.catalog.search_results() == [extra]
    assert "E" not in [lesson.id for lesson in session.catalog.lessons()]
    assert session.add_to_cart("E")


def test_visible_lessons_follow_active_view(loaded_session):
    session = loaded_session
    session.catalog.apply_search_results("music", [session.repository.get_by_id("B")])

    assert session.catalog.is_searching
    assert [lesson.id for lesson in session.visible_lessons()] == ["B"]

    session.catalog.clear_search()

    assert session.catalog.search_results() is None
    assert len(session.visible_lessons()) == 4


# ---------------------
# SORTING
# ---------------------

def test_sort_by_price_descending(loaded_session):
    session = loaded_session
    session.catalog.set_sort(SortKey.PRICE, descending=True)

    assert [lesson.price for lesson in session.catalog.lessons()] == [100, 80, 70, 60]


def test_sort_by_subject_applies_to_search_results(loaded_session):
    session = loaded_session
    session.catalog.apply_search_results(
        "m",
        [session.repository.get_by_id(lesson_id) for lesson_id in ("D", "B", "A")],
    )

    session.catalog.set_sort(SortKey.SUBJECT)

    assert [lesson.subject for lesson in session.catalog.search_results()] == [
        "Math",
        "Maths Club",
        "Music",
    ]


def test_clearing_sort_restores_fetch_order(loaded_session):
    session = loaded_session
    session.catalog.set_sort(SortKey.SPACES)
    session.catalog.set_sort(None)

    assert [lesson.id for lesson in session.catalog.lessons()] == ["A", "B", "C", "D"]
