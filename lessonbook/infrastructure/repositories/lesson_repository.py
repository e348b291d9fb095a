# lessonbook/infrastructure/repositories/lesson_repository.py

from typing import Iterable

from lessonbook.domain.exceptions import CapacityExhaustedError, LessonNotFoundError
from lessonbook.domain.models import Lesson


class LessonRepository:
    """
    Id-keyed mapping of lesson records.
    Every view projects over this mapping, so a capacity change
    made here is visible everywhere at once.
    """

    def __init__(self) -> None:
        self._lessons: dict[str, Lesson] = {}

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._lessons

    def get_by_id(self, lesson_id: str) -> Lesson | None:
        return self._lessons.get(lesson_id)

    def require(self, lesson_id: str) -> Lesson:
        lesson = self._lessons.get(lesson_id)

        if lesson is None:
            raise LessonNotFoundError(lesson_id)

        return lesson

    def get_many(self, lesson_ids: Iterable[str]) -> list[Lesson]:
        """Ids the repository no longer holds are skipped."""
        return [
            self._lessons[lesson_id]
            for lesson_id in lesson_ids
            if lesson_id in self._lessons
        ]

    def replace_all(self, lessons: Iterable[Lesson]) -> list[str]:
        self._lessons = {lesson.id: lesson for lesson in lessons}
        return list(self._lessons)

    def merge_missing(self, lessons: Iterable[Lesson]) -> list[str]:
        """
        Insert records for unknown ids only.
        Known ids keep their local record and its optimistic capacity.
        """
        ids = []
        for lesson in lessons:
            self._lessons.setdefault(lesson.id, lesson)
            ids.append(lesson.id)
        return ids

    def decrement_spaces(self, lesson_id: str, count: int = 1) -> Lesson:
        lesson = self.require(lesson_id)

        if lesson.spaces < count:
            raise CapacityExhaustedError(
                lesson_id,
                available=lesson.spaces,
                requested=count,
            )

        lesson.spaces -= count
        return lesson

    def increment_spaces(self, lesson_id: str, count: int) -> Lesson:
        lesson = self.require(lesson_id)
        lesson.spaces += count
        return lesson
