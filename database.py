"""
MongoDB access for the Lesson Booking App.

connect() opens one MongoClient (its pool is shared by every request);
LessonStore and OrderStore wrap the two collections the API uses.
"""
import math
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.database import Database

from schemas import INT64_MAX, INT64_MIN

load_dotenv()

DEFAULT_DATABASE_NAME = "lesson_app"
LESSONS_COLLECTION = "lessons"
ORDERS_COLLECTION = "orders"


class DatabaseConfigError(Exception):
    pass


def connect(url: Optional[str] = None, name: Optional[str] = None) -> Database:
    """Connect and ping the server; raise rather than hand back a dead handle."""
    url = url or os.getenv("DATABASE_URL") or os.getenv("MONGODB_URI")
    if not url:
        raise DatabaseConfigError("DATABASE_URL is not set. Check your .env file.")
    name = name or os.getenv("DATABASE_NAME", DEFAULT_DATABASE_NAME)

    client = MongoClient(url, serverSelectionTimeoutMS=5000)
    try:
        client.admin.command("ping")
    except Exception:
        client.close()
        raise
    return client[name]


# ----- Search -----

def parse_number(term: str) -> Optional[Union[int, float]]:
    # float() also reads "1_000"; a search term with digit separators is text
    if "_" in term:
        return None
    try:
        value = float(term)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    # integral values beyond int64 stay floats, as BSON cannot encode them as ints
    if value.is_integer() and INT64_MIN <= value <= INT64_MAX:
        return int(value)
    return value


def build_search_filter(term: Optional[str]) -> Optional[Dict[str, Any]]:
    term = (term or "").strip()
    if not term:
        return None

    pattern = re.escape(term.lower())
    clauses: List[Dict[str, Any]] = [
        {"subject": {"$regex": pattern, "$options": "i"}},
        {"location": {"$regex": pattern, "$options": "i"}},
    ]
    number = parse_number(term)
    if number is not None:
        clauses.append({"price": number})
        clauses.append({"spaces": number})
    return {"$or": clauses}


# ----- Stores -----

class LessonStore:
    def __init__(self, db: Database):
        self.collection = db[LESSONS_COLLECTION]

    def list_all(self) -> List[dict]:
        return list(self.collection.find({}))

    def search(self, term: Optional[str]) -> List[dict]:
        query = build_search_filter(term)
        if query is None:
            return self.list_all()
        return list(self.collection.find(query))

    def update_by_id(self, lesson_id: int, patch: Dict[str, Any]) -> bool:
        res = self.collection.update_one({"id": lesson_id}, {"$set": patch})
        return res.matched_count > 0

    def replace_all(self, lessons: Iterable[dict]) -> int:
        # not atomic: a failure after delete_many leaves the collection empty
        self.collection.delete_many({})
        docs = [dict(lesson) for lesson in lessons]
        if not docs:
            return 0
        res = self.collection.insert_many(docs)
        return len(res.inserted_ids)


class OrderStore:
    def __init__(self, db: Database):
        self.collection = db[ORDERS_COLLECTION]

    def insert(self, order: Dict[str, Any]) -> str:
        doc = dict(order)
        doc["createdAt"] = datetime.now(timezone.utc)
        res = self.collection.insert_one(doc)
        return str(res.inserted_id)

    def list_all(self) -> List[dict]:
        return list(self.collection.find({}))
