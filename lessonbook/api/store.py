"""In-memory lesson store backing the reference backend."""

import threading
from uuid import uuid4

from lessonbook.domain.exceptions import LessonNotFoundError
from lessonbook.domain.models import Lesson


DEMO_LESSONS = [
    {"subject": "Math", "location": "Hendon", "price": 100, "spaces": 5,
     "description": "Algebra and geometry for GCSE students."},
    {"subject": "Math", "location": "Colindale", "price": 80, "spaces": 5,
     "description": "Mental arithmetic drills."},
    {"subject": "English", "location": "Brent Cross", "price": 90, "spaces": 5,
     "description": "Creative writing workshop."},
    {"subject": "Music", "location": "Golders Green", "price": 95, "spaces": 5,
     "description": "Piano for beginners."},
    {"subject": "Science", "location": "Hendon", "price": 110, "spaces": 5,
     "description": "Hands-on chemistry experiments."},
    {"subject": "Art", "location": "Mill Hill", "price": 70, "spaces": 5,
     "description": "Watercolour and sketching."},
    {"subject": "Coding", "location": "Colindale", "price": 120, "spaces": 5,
     "description": "Python for teenagers."},
    {"subject": "Drama", "location": "Edgware", "price": 85, "spaces": 5,
     "description": "Improvisation and stagecraft."},
    {"subject": "Chess", "location": "Finchley", "price": 60, "spaces": 5,
     "description": "Openings and endgames."},
    {"subject": "Spanish", "location": "Brent Cross", "price": 75, "spaces": 5,
     "description": "Conversational Spanish."},
]


class LessonStore:

    def __init__(self, lessons: list[Lesson] | None = None):
        self._lock = threading.Lock()
        self._lessons: dict[str, Lesson] = {
            lesson.id: lesson for lesson in (lessons or [])
        }
        self.orders: list[dict] = []

    @classmethod
    def with_demo_data(cls) -> "LessonStore":
        return cls([
            Lesson(id=str(index), **item)
            for index, item in enumerate(DEMO_LESSONS, start=1)
        ])

    def list_lessons(self) -> list[Lesson]:
        with self._lock:
            return list(self._lessons.values())

    def search(self, query: str) -> list[Lesson]:
        needle = query.strip().casefold()
        if not needle:
            return self.list_lessons()

        with self._lock:
            return [
                lesson
                for lesson in self._lessons.values()
                if any(
                    needle in str(value).casefold()
                    for value in (
                        lesson.subject,
                        lesson.location,
                        lesson.description,
                        lesson.price,
                        lesson.spaces,
                    )
                )
            ]

    def set_spaces(self, lesson_id: str, spaces: int) -> Lesson:
        with self._lock:
            lesson = self._lessons.get(lesson_id)
            if lesson is None:
                raise LessonNotFoundError(lesson_id)
            lesson.spaces = spaces
            return lesson

    def create_order(self, order: dict) -> str:
        with self._lock:
            missing = [
                lesson_id
                for lesson_id in order["lessonIds"]
                if lesson_id not in self._lessons
            ]
            if missing:
                raise LessonNotFoundError(missing[0])

            order_id = str(uuid4())
            self.orders.append({"id": order_id, **order})
            return order_id
