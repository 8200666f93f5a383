"""Pydantic models for insight records and API responses."""

from insightboard.models.insight import (
    CATEGORY_FIELDS,
    SEARCH_FIELDS,
    FieldValue,
    InsightRecord,
)
from insightboard.models.responses import (
    CategoryResponse,
    CountByCountryResponse,
    CountryInsights,
    ErrorResponse,
    InsightCountsResponse,
    IntensityByTopicResponse,
    IntensityOverYearsResponse,
    LikelihoodByCountryResponse,
    LikelihoodGroup,
    PestleDistributionResponse,
    RegionTopics,
    RelevanceByRegionResponse,
    RelevantTopicsResponse,
    SearchResponse,
    TopicCount,
)

__all__ = [
    "CATEGORY_FIELDS",
    "SEARCH_FIELDS",
    "FieldValue",
    "InsightRecord",
    "CategoryResponse",
    "CountByCountryResponse",
    "CountryInsights",
    "ErrorResponse",
    "InsightCountsResponse",
    "IntensityByTopicResponse",
    "IntensityOverYearsResponse",
    "LikelihoodByCountryResponse",
    "LikelihoodGroup",
    "PestleDistributionResponse",
    "RegionTopics",
    "RelevanceByRegionResponse",
    "RelevantTopicsResponse",
    "SearchResponse",
    "TopicCount",
]
