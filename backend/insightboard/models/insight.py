"""Insight record model.

Records are schemaless in the store. Every known field is optional and holds
a string, a number or nothing; unknown fields pass through untouched.
"""

from typing import Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

FieldValue = Union[int, float, str, None]

# Fields the category filter may match on, in priority order
CATEGORY_FIELDS = ("sector", "topic", "country", "pestle")

# Fields the free-text search matches on
SEARCH_FIELDS = ("title", "insight")


class InsightRecord(BaseModel):
    """One document from the insight collection."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )

    id: Optional[str] = Field(default=None, alias="_id")

    topic: FieldValue = None
    intensity: FieldValue = None
    relevance: FieldValue = None
    likelihood: FieldValue = None
    impact: FieldValue = None
    region: FieldValue = None
    country: FieldValue = None
    sector: FieldValue = None
    pestle: FieldValue = None
    source: FieldValue = None
    title: FieldValue = None
    insight: FieldValue = None
    url: FieldValue = None
    published: FieldValue = None
    added: FieldValue = None
    start_year: FieldValue = None
    end_year: FieldValue = None

    @classmethod
    def from_document(cls, document: dict) -> "InsightRecord":
        """Build a record from a raw store document."""
        values = {
            key: str(value) if isinstance(value, ObjectId) else value
            for key, value in document.items()
        }
        return cls.model_validate(values)
