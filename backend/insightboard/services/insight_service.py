"""
Insight query service.

One coroutine per API endpoint. Each builds its query, runs it through the
injected repository and reshapes the rows into a response model. Any error
raised while querying or reshaping surfaces as QueryFailure.
"""

import logging
import math
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from insightboard.database.repository import InsightRepository
from insightboard.models import (
    CategoryResponse,
    CountByCountryResponse,
    CountryInsights,
    InsightCountsResponse,
    InsightRecord,
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
from insightboard.services import pipelines
from insightboard.services.exceptions import QueryFailure
from insightboard.services.published import published_year

logger = logging.getLogger(__name__)

T = TypeVar("T")


def format_metric(value: Optional[float]) -> str:
    """Two-decimal string for an average or sum."""
    return f"{(value or 0):.2f}"


def _column(rows: List[Dict[str, Any]], key: str) -> List[Any]:
    return [row[key] for row in rows]


def _metric_column(rows: List[Dict[str, Any]], key: str) -> List[str]:
    return [format_metric(row[key]) for row in rows]


def _facet_total(facet: Dict[str, Any], name: str) -> int:
    """Read a `$count` result out of a facet; empty facets count as zero."""
    entries = facet.get(name) or []
    return entries[0]["total"] if entries else 0


class InsightQueryService:
    """Computes the insight endpoint payloads from a repository."""

    def __init__(
        self,
        repository: InsightRepository,
        categories_limit: int = 10,
    ):
        self.repository = repository
        self.categories_limit = categories_limit

    async def _run(self, operation: str, query: Callable[[], Awaitable[T]]) -> T:
        """Run one endpoint's query, collapsing any failure into QueryFailure."""
        try:
            return await query()
        except QueryFailure:
            raise
        except Exception as e:
            logger.exception(f"Query failed in {operation}: {e}")
            raise QueryFailure(str(e), operation=operation) from e

    # ========================================================================
    # Parallel-array aggregates
    # ========================================================================

    async def average_intensity_by_topic(self) -> IntensityByTopicResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.average_intensity_by_topic())
            return IntensityByTopicResponse(
                topics=_column(rows, "_id"),
                intensity=_metric_column(rows, "averageIntensity"),
            )

        return await self._run("average_intensity_by_topic", query)

    async def relevance_by_region(self) -> RelevanceByRegionResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.total_relevance_by_region())
            return RelevanceByRegionResponse(
                regions=_column(rows, "_id"),
                relevance=_metric_column(rows, "totalRelevance"),
            )

        return await self._run("relevance_by_region", query)

    async def likelihood_by_country(self) -> LikelihoodByCountryResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.average_likelihood_by_country())
            return LikelihoodByCountryResponse(
                countries=_column(rows, "_id"),
                likelihood=_metric_column(rows, "averageLikelihood"),
            )

        return await self._run("likelihood_by_country", query)

    async def intensity_over_years(self) -> IntensityOverYearsResponse:
        """
        Average intensity per publication year, oldest year first.

        Records whose `published` value does not parse are skipped and counted
        in a warning rather than failing the request.
        """
        async def query():
            rows = await self.repository.aggregate(pipelines.published_intensity())

            by_year: Dict[int, List[float]] = defaultdict(list)
            skipped = 0
            for row in rows:
                year = published_year(row.get("published"))
                if year is None:
                    skipped += 1
                    continue
                by_year[year].append(row["intensity"])

            if skipped:
                logger.warning(f"Skipped {skipped} records with unparseable published dates")

            years = sorted(by_year)
            return IntensityOverYearsResponse(
                years=years,
                intensity=[
                    format_metric(sum(by_year[year]) / len(by_year[year]))
                    for year in years
                ],
            )

        return await self._run("intensity_over_years", query)

    async def count_by_country(self) -> CountByCountryResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.count_by_country())
            return CountByCountryResponse(
                countries=_column(rows, "_id"),
                count=_column(rows, "count"),
            )

        return await self._run("count_by_country", query)

    async def relevant_topics(self) -> RelevantTopicsResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.average_relevance_by_topic())
            return RelevantTopicsResponse(
                topics=_column(rows, "_id"),
                relevance=_metric_column(rows, "averageRelevance"),
            )

        return await self._run("relevant_topics", query)

    async def pestle_distribution(self) -> PestleDistributionResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.count_by_pestle())
            return PestleDistributionResponse(
                pestle=_column(rows, "_id"),
                count=_column(rows, "count"),
            )

        return await self._run("pestle_distribution", query)

    # ========================================================================
    # Grouped aggregates
    # ========================================================================

    async def topics_by_region(self) -> List[RegionTopics]:
        async def query():
            rows = await self.repository.aggregate(pipelines.topics_by_region())
            regions = []
            for row in sorted(rows, key=lambda r: r["_id"]):
                # $push does not guarantee order
                topics = sorted(row["topics"], key=lambda t: (-t["count"], t["topic"]))
                regions.append(
                    RegionTopics(
                        region=row["_id"],
                        topics=[TopicCount(**topic) for topic in topics],
                    )
                )
            return regions

        return await self._run("topics_by_region", query)

    async def collection_counts(self) -> InsightCountsResponse:
        async def query():
            rows = await self.repository.aggregate(pipelines.collection_counts())
            facet = rows[0] if rows else {}
            return InsightCountsResponse(
                insights_count=_facet_total(facet, "insights"),
                topics_count=_facet_total(facet, "topics"),
                sectors_count=_facet_total(facet, "sectors"),
                published_count=_facet_total(facet, "published"),
            )

        return await self._run("collection_counts", query)

    async def insights_by_likelihood(self) -> List[LikelihoodGroup]:
        async def query():
            rows = await self.repository.aggregate(pipelines.insights_by_likelihood())
            return [
                LikelihoodGroup(likelihood=row["_id"], total_insights=row["totalInsights"])
                for row in rows
            ]

        return await self._run("insights_by_likelihood", query)

    async def top_countries(self, limit: int = 5) -> List[CountryInsights]:
        async def query():
            rows = await self.repository.aggregate(pipelines.top_countries_by_insights(limit))
            return [
                CountryInsights(country=row["_id"], total_insights=row["totalInsights"])
                for row in rows
            ]

        return await self._run("top_countries", query)

    # ========================================================================
    # Record listings
    # ========================================================================

    async def search(self, search: str = "", page: int = 1, limit: int = 10) -> SearchResponse:
        """
        Page through records whose title or insight contains `search`.

        Args:
            search: Case-insensitive substring, empty matches everything
            page: 1-based page number
            limit: Page size
        """
        async def query():
            filter = pipelines.search_filter(search)
            documents = await self.repository.find_many(
                filter, skip=(page - 1) * limit, limit=limit
            )
            total = await self.repository.count(filter)
            return SearchResponse(
                status=1,
                data=[InsightRecord.from_document(doc) for doc in documents],
                total=total,
                page=page,
                per_page=limit,
                total_pages=math.ceil(total / limit),
            )

        return await self._run("search", query)

    async def by_category(
        self,
        sector: Optional[str] = None,
        topic: Optional[str] = None,
        country: Optional[str] = None,
        pestle: Optional[str] = None,
    ) -> CategoryResponse:
        """Records matching the highest-priority category given."""
        async def query():
            filter = pipelines.category_filter(sector, topic, country, pestle)
            documents = await self.repository.find_many(filter, limit=self.categories_limit)
            return CategoryResponse(
                status=1,
                data=[InsightRecord.from_document(doc) for doc in documents],
            )

        return await self._run("by_category", query)
