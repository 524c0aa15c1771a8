"""
Reset the lesson catalog.

Wipes the lessons collection and inserts the ten default lessons. Run it
as a one-off (`python seed.py`) while the API is not serving traffic.
"""
import logging
import sys

from pymongo.errors import PyMongoError

from database import DatabaseConfigError, LessonStore, connect
from logger import setup_logging
from schemas import Lesson

logger = logging.getLogger("lesson_api.seed")

LESSONS = [
    {
        "id": 1,
        "subject": "Mathematics",
        "location": "Hendon",
        "price": 100,
        "spaces": 5,
        "icon": "fa-solid fa-calculator",
        "image": "https://img.icons8.com/color/240/calculator--v1.png",
    },
    {
        "id": 2,
        "subject": "English",
        "location": "Colindale",
        "price": 80,
        "spaces": 5,
        "icon": "fa-solid fa-book-open",
        "image": "https://img.icons8.com/color/240/book-reading.png",
    },
    {
        "id": 3,
        "subject": "Biology",
        "location": "Golders Green",
        "price": 90,
        "spaces": 5,
        "icon": "fa-solid fa-seedling",
        "image": "https://img.icons8.com/color/240/dna-helix.png",
    },
    {
        "id": 4,
        "subject": "Chemistry",
        "location": "Brent Cross",
        "price": 70,
        "spaces": 5,
        "icon": "fa-solid fa-flask",
        "image": "https://img.icons8.com/color/240/test-tube.png",
    },
    {
        "id": 5,
        "subject": "History",
        "location": "Hendon",
        "price": 50,
        "spaces": 5,
        "icon": "fa-solid fa-landmark",
        "image": "https://img.icons8.com/color/240/scroll.png",
    },
    {
        "id": 6,
        "subject": "Physics",
        "location": "Colindale",
        "price": 95,
        "spaces": 5,
        "icon": "fa-solid fa-atom",
        "image": "https://img.icons8.com/color/240/physics.png",
    },
    {
        "id": 7,
        "subject": "Art",
        "location": "Brent Cross",
        "price": 60,
        "spaces": 5,
        "icon": "fa-solid fa-palette",
        "image": "https://img.icons8.com/color/240/art-prices.png",
    },
    {
        "id": 8,
        "subject": "Geography",
        "location": "Golders Green",
        "price": 85,
        "spaces": 5,
        "icon": "fa-solid fa-earth-europe",
        "image": "https://img.icons8.com/color/240/globe--v1.png",
    },
    {
        "id": 9,
        "subject": "Computer Science",
        "location": "Hendon",
        "price": 120,
        "spaces": 5,
        "icon": "fa-solid fa-code",
        "image": "https://img.icons8.com/color/240/source-code.png",
    },
    {
        "id": 10,
        "subject": "Economics",
        "location": "Colindale",
        "price": 110,
        "spaces": 5,
        "icon": "fa-solid fa-chart-line",
        "image": "https://img.icons8.com/color/240/economic-improvement.png",
    },
]


def seed_lessons(store: LessonStore) -> int:
    for lesson in LESSONS:
        Lesson.model_validate(lesson)
    count = store.replace_all(LESSONS)
    logger.info("Old lessons cleared, %d lessons inserted", count)
    return count


def main() -> int:
    setup_logging()
    try:
        db = connect()
        logger.info("Connected to MongoDB, DB: %s", db.name)
        seed_lessons(LessonStore(db))
    except DatabaseConfigError as e:
        logger.error("%s", e)
        return 1
    except PyMongoError:
        logger.exception("Seeding failed")
        return 1
    logger.info("Seeding completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
