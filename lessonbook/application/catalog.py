import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol

from lessonbook.domain.models import Lesson, SortKey
from lessonbook.infrastructure.repositories.lesson_repository import LessonRepository


logger = logging.getLogger(__name__)


class LessonSource(Protocol):
    async def fetch_lessons(self) -> list[Lesson]: ...


@dataclass
class SearchProjection:
    query: str
    lesson_ids: list[str] = field(default_factory=list)


class LessonCatalog:
    """
    Catalog view and search projection over one LessonRepository.
    Neither view owns lesson records; both hold ordered ids only.
    """

    def __init__(self, repository: LessonRepository, source: LessonSource):
        self.repository = repository
        self._source = source
        self._catalog_ids: list[str] = []
        self._search: SearchProjection | None = None
        self._sort_key: SortKey | None = None
        self._descending = False

    async def load(self, held: Mapping[str, int] | None = None) -> list[Lesson]:
        """
        Fetch the catalog and replace all records wholesale.
        Quantities still held in the cart are taken off the fresh records.
        FetchFailureError propagates with the previous records untouched.
        """
        lessons = await self._source.fetch_lessons()
        self._catalog_ids = self.repository.replace_all(lessons)

        for lesson_id, quantity in (held or {}).items():
            lesson = self.repository.get_by_id(lesson_id)
            if lesson is None:
                continue
            if lesson.spaces < quantity:
                logger.warning(
                    "Lesson %s now has %s spaces but %s are held in the cart",
                    lesson_id,
                    lesson.spaces,
                    quantity,
                )
            lesson.spaces = max(lesson.spaces - quantity, 0)

        logger.info("Catalog loaded with %s lessons", len(self._catalog_ids))
        return self.lessons()

    # -----------------------------
    # Views
    # -----------------------------
    def lessons(self) -> list[Lesson]:
        return self._project(self._catalog_ids)

    def search_results(self) -> list[Lesson] | None:
        if self._search is None:
            return None
        return self._project(self._search.lesson_ids)

    def visible_lessons(self) -> list[Lesson]:
        """The authoritative view: search results while searching, else the catalog."""
        results = self.search_results()
        return self.lessons() if results is None else results

    @property
    def is_searching(self) -> bool:
        return self._search is not None

    @property
    def search_query(self) -> str | None:
        return self._search.query if self._search else None

    def find(self, lesson_id: str) -> Lesson:
        return self.repository.require(lesson_id)

    # -----------------------------
    # Search projection
    # -----------------------------
    def apply_search_results(self, query: str, lessons: list[Lesson]) -> list[Lesson]:
        ids = self.repository.merge_missing(lessons)
        self._search = SearchProjection(query=query, lesson_ids=ids)
        return self.search_results() or []

    def clear_search(self) -> None:
        self._search = None

    # -----------------------------
    # Capacity
    # -----------------------------
    def reserve(self, lesson_id: str, count: int = 1) -> Lesson:
        return self.repository.decrement_spaces(lesson_id, count)

    def release(self, lesson_id: str, count: int) -> Lesson:
        return self.repository.increment_spaces(lesson_id, count)

    # -----------------------------
    # Sorting
    # -----------------------------
    def set_sort(self, key: SortKey | None, descending: bool = False) -> None:
        self._sort_key = key
        self._descending = descending

    def _project(self, lesson_ids: list[str]) -> list[Lesson]:
        lessons = self.repository.get_many(lesson_ids)

        if self._sort_key is None:
            return lessons

        attribute = self._sort_key.value
        if self._sort_key in (SortKey.SUBJECT, SortKey.LOCATION):
            return sorted(
                lessons,
                key=lambda lesson: getattr(lesson, attribute).casefold(),
                reverse=self._descending,
            )

        return sorted(
            lessons,
            key=lambda lesson: getattr(lesson, attribute),
            reverse=self._descending,
        )
