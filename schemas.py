"""
Database Schemas for the Lesson Booking App

Lesson and Order are the documents stored in the lessons and orders
collections; LessonUpdate and OrderItem validate parts of incoming requests.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

# BSON stores integers as signed 64-bit values
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class Lesson(BaseModel):
    id: int = Field(..., description="Business key, distinct from the Mongo _id")
    subject: str
    location: str
    price: float = Field(..., ge=0)
    spaces: int = Field(..., ge=0, description="Remaining capacity")
    icon: str = Field(..., description="Font Awesome icon class")
    image: str = Field(..., description="Image URL")


class LessonUpdate(BaseModel):
    """Fields a client may change on an existing lesson."""

    model_config = ConfigDict(extra="forbid")

    subject: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    spaces: Optional[int] = Field(None, ge=0, le=INT64_MAX)
    icon: Optional[str] = None
    image: Optional[str] = None


class OrderItem(BaseModel):
    # extra keys sent by the storefront are stored as supplied
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., ge=INT64_MIN, le=INT64_MAX)
    quantity: int = Field(..., ge=INT64_MIN, le=INT64_MAX)


class Order(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=r"^[0-9]{8,}$")
    items: List[OrderItem] = Field(..., min_length=1)
    total: float = 0
    createdAt: Optional[datetime] = None
