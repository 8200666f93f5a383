"""Insight API routes.

Every route is a read-only GET that delegates to InsightQueryService.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from insightboard.api.dependencies import get_app_settings, get_service
from insightboard.config import Settings
from insightboard.models import (
    CategoryResponse,
    CountByCountryResponse,
    CountryInsights,
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
)
from insightboard.services import InsightQueryService

router = APIRouter(prefix="/api", tags=["Insights"])

# skip and limit travel to MongoDB as BSON int64
MAX_INT64 = 2**63 - 1


@router.get("/average-intensity-by-topic", response_model=IntensityByTopicResponse)
async def average_intensity_by_topic(service: InsightQueryService = Depends(get_service)):
    """Average intensity per topic, highest first."""
    return await service.average_intensity_by_topic()


@router.get("/most-relevant-insights-by-region", response_model=RelevanceByRegionResponse)
async def most_relevant_insights_by_region(service: InsightQueryService = Depends(get_service)):
    """Total relevance per region, highest first."""
    return await service.relevance_by_region()


@router.get("/likelihood-by-country", response_model=LikelihoodByCountryResponse)
async def likelihood_by_country(service: InsightQueryService = Depends(get_service)):
    """Average likelihood per country, highest first."""
    return await service.likelihood_by_country()


@router.get("/intensity-over-years", response_model=IntensityOverYearsResponse)
async def intensity_over_years(service: InsightQueryService = Depends(get_service)):
    """Average intensity per publication year, oldest first."""
    return await service.intensity_over_years()


@router.get("/insights-count-by-country", response_model=CountByCountryResponse)
async def insights_count_by_country(service: InsightQueryService = Depends(get_service)):
    """Number of insights per country, most first."""
    return await service.count_by_country()


@router.get("/prevalent-topics-by-region", response_model=List[RegionTopics])
async def prevalent_topics_by_region(service: InsightQueryService = Depends(get_service)):
    """Topic counts nested under each region, regions alphabetical."""
    return await service.topics_by_region()


@router.get("/most-relevant-topics", response_model=RelevantTopicsResponse)
async def most_relevant_topics(service: InsightQueryService = Depends(get_service)):
    """Average relevance per topic, highest first."""
    return await service.relevant_topics()


@router.get("/distribution-by-pestle", response_model=PestleDistributionResponse)
async def distribution_by_pestle(service: InsightQueryService = Depends(get_service)):
    """Number of insights per PESTLE category, most first."""
    return await service.pestle_distribution()


@router.get("/search", response_model=SearchResponse, response_model_exclude_unset=True)
async def search(
    search: str = "",
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=MAX_INT64),
    service: InsightQueryService = Depends(get_service),
    settings: Settings = Depends(get_app_settings),
):
    """Page through insights whose title or text contains `search`."""
    limit = limit or settings.pagination_default_limit
    if settings.pagination_max_limit and limit > settings.pagination_max_limit:
        raise HTTPException(
            status_code=422,
            detail=f"limit must be at most {settings.pagination_max_limit}",
        )
    if (page - 1) * limit > MAX_INT64:
        raise HTTPException(status_code=422, detail="page is too large for this limit")
    return await service.search(search=search, page=page, limit=limit)


@router.get(
    "/get-insights-by-categories",
    response_model=CategoryResponse,
    response_model_exclude_unset=True,
)
async def get_insights_by_categories(
    sector: str = "",
    topic: str = "",
    country: str = "",
    pestle: str = "",
    service: InsightQueryService = Depends(get_service),
):
    """Insights matching one category; sector wins over topic, country, then pestle."""
    return await service.by_category(sector=sector, topic=topic, country=country, pestle=pestle)


@router.get("/get-count", response_model=InsightCountsResponse)
async def get_count(service: InsightQueryService = Depends(get_service)):
    """Total insights and distinct topic, sector and published counts."""
    return await service.collection_counts()


@router.get("/insights-with-different-likelihood", response_model=List[LikelihoodGroup])
async def insights_with_different_likelihood(service: InsightQueryService = Depends(get_service)):
    """Number of insights per likelihood value."""
    return await service.insights_by_likelihood()


@router.get(
    "/top-5-countries-with-highest-number-of-insights",
    response_model=List[CountryInsights],
)
async def top_countries(service: InsightQueryService = Depends(get_service)):
    """The five countries with the most insights."""
    return await service.top_countries(limit=5)
