"""
Aggregation pipelines and filters for the insight endpoints.

Every builder is a pure function returning the MongoDB query it describes,
so the exact query shape can be checked without a database.

Missing values:
- Group keys must be non-empty strings (absent, null and "" are dropped)
- Averaged or summed fields must be stored as numbers
"""

import re
from typing import Any, Dict, List, Optional

from insightboard.models.insight import CATEGORY_FIELDS, SEARCH_FIELDS

Pipeline = List[Dict[str, Any]]


def present_string(field: str) -> Dict[str, Any]:
    """Match documents whose field is a non-empty string."""
    return {field: {"$type": "string", "$ne": ""}}


def present_number(field: str) -> Dict[str, Any]:
    """Match documents whose field is stored as a number."""
    return {field: {"$type": "number"}}


def present_value(field: str) -> Dict[str, Any]:
    """Match documents whose field is neither missing, null nor empty."""
    return {field: {"$nin": [None, ""]}}


def contains(text: str) -> Dict[str, Any]:
    """Case-insensitive literal substring match."""
    return {"$regex": re.escape(text), "$options": "i"}


def _grouped_metric(key: str, metric: str, accumulator: str, value: Any) -> Pipeline:
    """Group by a string key, accumulate one metric, highest first."""
    match = present_string(key)
    if isinstance(value, str) and value.startswith("$"):
        match.update(present_number(value[1:]))

    return [
        {"$match": match},
        {"$group": {"_id": f"${key}", metric: {accumulator: value}}},
        {"$sort": {metric: -1, "_id": 1}},
    ]


# ============================================================================
# Parallel-array aggregates
# ============================================================================


def average_intensity_by_topic() -> Pipeline:
    return _grouped_metric("topic", "averageIntensity", "$avg", "$intensity")


def total_relevance_by_region() -> Pipeline:
    return _grouped_metric("region", "totalRelevance", "$sum", "$relevance")


def average_likelihood_by_country() -> Pipeline:
    return _grouped_metric("country", "averageLikelihood", "$avg", "$likelihood")


def average_relevance_by_topic() -> Pipeline:
    return _grouped_metric("topic", "averageRelevance", "$avg", "$relevance")


def count_by_country() -> Pipeline:
    return _grouped_metric("country", "count", "$sum", 1)


def count_by_pestle() -> Pipeline:
    return _grouped_metric("pestle", "count", "$sum", 1)


def published_intensity() -> Pipeline:
    """
    Fetch (published, intensity) pairs for the yearly intensity series.

    Dates are parsed and grouped by year in the service, which skips values
    that do not parse instead of failing the whole query.
    """
    return [
        {"$match": {**present_string("published"), **present_number("intensity")}},
        {"$project": {"_id": 0, "published": 1, "intensity": 1}},
    ]


# ============================================================================
# Grouped aggregates
# ============================================================================


def topics_by_region() -> Pipeline:
    """Count (region, topic) pairs and nest the topics under their region."""
    return [
        {"$match": {**present_string("region"), **present_string("topic")}},
        {
            "$group": {
                "_id": {"region": "$region", "topic": "$topic"},
                "count": {"$sum": 1},
            }
        },
        {"$sort": {"count": -1, "_id.topic": 1}},
        {
            "$group": {
                "_id": "$_id.region",
                "topics": {"$push": {"topic": "$_id.topic", "count": "$count"}},
            }
        },
        {"$sort": {"_id": 1}},
    ]


def insights_by_likelihood() -> Pipeline:
    return [
        {"$match": present_value("likelihood")},
        {"$group": {"_id": "$likelihood", "totalInsights": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]


def top_countries_by_insights(limit: int = 5) -> Pipeline:
    return [
        {"$match": present_string("country")},
        {"$group": {"_id": "$country", "totalInsights": {"$sum": 1}}},
        {"$sort": {"totalInsights": -1, "_id": 1}},
        {"$limit": limit},
    ]


def _distinct_count(field: str) -> Pipeline:
    return [
        {"$match": present_value(field)},
        {"$group": {"_id": f"${field}"}},
        {"$count": "total"},
    ]


def collection_counts() -> Pipeline:
    """Total records plus distinct sector, topic and published values, in one pass."""
    return [
        {
            "$facet": {
                "insights": [{"$count": "total"}],
                "sectors": _distinct_count("sector"),
                "topics": _distinct_count("topic"),
                "published": _distinct_count("published"),
            }
        }
    ]


# ============================================================================
# Record filters
# ============================================================================


def search_filter(search: str = "") -> Dict[str, Any]:
    """Records whose title or insight text contains the search string."""
    return {"$or": [{field: contains(search)} for field in SEARCH_FIELDS]}


def category_filter(
    sector: Optional[str] = None,
    topic: Optional[str] = None,
    country: Optional[str] = None,
    pestle: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Filter on the first non-empty category, in sector, topic, country, pestle order.

    With no category given, falls back to an empty pestle pattern.
    """
    values = dict(zip(CATEGORY_FIELDS, (sector, topic, country, pestle)))
    for field in CATEGORY_FIELDS:
        if values[field]:
            return {field: contains(values[field])}
    return {"pestle": contains(pestle or "")}
