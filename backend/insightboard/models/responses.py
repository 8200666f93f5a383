"""Response schemas for the insight API.

Parallel-array responses carry one list per column; index i across the lists
describes one group. Averages and sums are pre-formatted strings with two
decimals, counts are integers.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from insightboard.models.insight import FieldValue, InsightRecord


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


# ============================================================================
# Parallel-array aggregates
# ============================================================================


class IntensityByTopicResponse(BaseSchema):
    topics: List[str]
    intensity: List[str]


class RelevanceByRegionResponse(BaseSchema):
    regions: List[str]
    relevance: List[str]


class LikelihoodByCountryResponse(BaseSchema):
    countries: List[str]
    likelihood: List[str]


class IntensityOverYearsResponse(BaseSchema):
    years: List[int]
    intensity: List[str]


class CountByCountryResponse(BaseSchema):
    countries: List[str]
    count: List[int]


class RelevantTopicsResponse(BaseSchema):
    topics: List[str]
    relevance: List[str]


class PestleDistributionResponse(BaseSchema):
    pestle: List[str]
    count: List[int]


# ============================================================================
# Grouped aggregates
# ============================================================================


class TopicCount(BaseSchema):
    topic: str
    count: int


class RegionTopics(BaseSchema):
    """Topics within one region, most frequent first."""

    region: str = Field(alias="_id")
    topics: List[TopicCount]


class LikelihoodGroup(BaseSchema):
    likelihood: FieldValue = Field(alias="_id")
    total_insights: int = Field(alias="totalInsights")


class CountryInsights(BaseSchema):
    country: str = Field(alias="_id")
    total_insights: int = Field(alias="totalInsights")


class InsightCountsResponse(BaseSchema):
    """Collection-wide totals."""

    insights_count: int = Field(alias="insightsCount")
    topics_count: int = Field(alias="topicsCount")
    sectors_count: int = Field(alias="sectorsCount")
    published_count: int = Field(alias="publishedCount")


# ============================================================================
# Record listings
# ============================================================================


class SearchResponse(BaseSchema):
    """One page of free-text search results."""

    status: int = 1
    data: List[InsightRecord]
    total: int
    page: int
    per_page: int = Field(alias="perPage")
    total_pages: int = Field(alias="totalPages")


class CategoryResponse(BaseSchema):
    status: int = 1
    data: List[InsightRecord]


class ErrorResponse(BaseSchema):
    """Body returned for every failed request."""

    status: int = 0
    message: str
