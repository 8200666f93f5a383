"""Tests for InsightQueryService response shaping and failure handling."""

import asyncio
import math

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from insightboard.services import InsightQueryService, QueryFailure
from insightboard.services import pipelines
from insightboard.services.insight_service import format_metric
from tests.fakes import FakeRepository


def _documents(n):
    return [
        {"_id": ObjectId(), "title": f"Insight {i}", "insight": "text", "intensity": i}
        for i in range(n)
    ]


def test_format_metric_two_decimals() -> None:
    assert format_metric(6) == "6.00"
    assert format_metric(2.345678) == "2.35"
    assert format_metric(None) == "0.00"


def test_average_intensity_keeps_numeric_order() -> None:
    repo = FakeRepository(rows=[
        {"_id": "gas", "averageIntensity": 10.0},
        {"_id": "oil", "averageIntensity": 9.5},
        {"_id": "coal", "averageIntensity": 2.3333},
    ])
    service = InsightQueryService(repo)

    result = asyncio.run(service.average_intensity_by_topic())

    assert result.topics == ["gas", "oil", "coal"]
    assert result.intensity == ["10.00", "9.50", "2.33"]
    assert len(result.topics) == len(result.intensity)
    assert repo.pipelines == [pipelines.average_intensity_by_topic()]


def test_parallel_array_endpoints() -> None:
    repo = FakeRepository(rows=[{"_id": "Asia", "totalRelevance": 12}])
    result = asyncio.run(InsightQueryService(repo).relevance_by_region())
    assert (result.regions, result.relevance) == (["Asia"], ["12.00"])

    repo = FakeRepository(rows=[{"_id": "India", "averageLikelihood": 3.456}])
    result = asyncio.run(InsightQueryService(repo).likelihood_by_country())
    assert (result.countries, result.likelihood) == (["India"], ["3.46"])

    repo = FakeRepository(rows=[{"_id": "oil", "averageRelevance": 4}])
    result = asyncio.run(InsightQueryService(repo).relevant_topics())
    assert (result.topics, result.relevance) == (["oil"], ["4.00"])


def test_count_endpoints_return_integers() -> None:
    repo = FakeRepository(rows=[{"_id": "United States of America", "count": 9}, {"_id": "India", "count": 4}])
    result = asyncio.run(InsightQueryService(repo).count_by_country())
    assert result.countries == ["United States of America", "India"]
    assert result.count == [9, 4]

    repo = FakeRepository(rows=[{"_id": "Economic", "count": 7}])
    result = asyncio.run(InsightQueryService(repo).pestle_distribution())
    assert (result.pestle, result.count) == (["Economic"], [7])


def test_intensity_over_years_groups_by_parsed_year() -> None:
    repo = FakeRepository(rows=[
        {"published": "January, 01 2020 00:00:00", "intensity": 6},
        {"published": "March, 15 2020 10:30:00", "intensity": 4},
        {"published": "June, 10 2017 08:00:00", "intensity": 2},
        {"published": "not a date", "intensity": 100},
        {"published": "Jan, 01 2018 00:00:00", "intensity": 100},
    ])

    result = asyncio.run(InsightQueryService(repo).intensity_over_years())

    assert result.years == [2017, 2020]
    assert result.intensity == ["2.00", "5.00"]


def test_intensity_over_years_with_only_bad_dates_is_empty() -> None:
    repo = FakeRepository(rows=[{"published": "garbage", "intensity": 3}])

    result = asyncio.run(InsightQueryService(repo).intensity_over_years())

    assert result.years == []
    assert result.intensity == []


def test_topics_by_region_sorts_topics_within_region() -> None:
    repo = FakeRepository(rows=[
        {"_id": "Northern America", "topics": [{"topic": "oil", "count": 1}, {"topic": "gas", "count": 5}]},
        {"_id": "Africa", "topics": [{"topic": "water", "count": 2}, {"topic": "energy", "count": 2}]},
    ])

    result = asyncio.run(InsightQueryService(repo).topics_by_region())

    assert [region.region for region in result] == ["Africa", "Northern America"]
    assert [(t.topic, t.count) for t in result[0].topics] == [("energy", 2), ("water", 2)]
    assert [(t.topic, t.count) for t in result[1].topics] == [("gas", 5), ("oil", 1)]


def test_collection_counts_reads_facets() -> None:
    repo = FakeRepository(rows=[{
        "insights": [{"total": 1000}],
        "sectors": [{"total": 12}],
        "topics": [{"total": 83}],
        "published": [{"total": 420}],
    }])

    result = asyncio.run(InsightQueryService(repo).collection_counts())

    assert result.insights_count == 1000
    assert result.sectors_count == 12
    assert result.topics_count == 83
    assert result.published_count == 420


def test_collection_counts_on_empty_collection() -> None:
    repo = FakeRepository(rows=[{"insights": [], "sectors": [], "topics": [], "published": []}])

    result = asyncio.run(InsightQueryService(repo).collection_counts())

    assert result.model_dump(by_alias=True) == {
        "insightsCount": 0,
        "topicsCount": 0,
        "sectorsCount": 0,
        "publishedCount": 0,
    }


def test_likelihood_groups_and_top_countries() -> None:
    repo = FakeRepository(rows=[{"_id": 1, "totalInsights": 3}, {"_id": 4, "totalInsights": 8}])
    groups = asyncio.run(InsightQueryService(repo).insights_by_likelihood())
    assert [(g.likelihood, g.total_insights) for g in groups] == [(1, 3), (4, 8)]

    repo = FakeRepository(rows=[{"_id": "India", "totalInsights": 50}])
    countries = asyncio.run(InsightQueryService(repo).top_countries())
    assert countries[0].model_dump(by_alias=True) == {"_id": "India", "totalInsights": 50}
    assert repo.pipelines[0][-1] == {"$limit": 5}


def test_search_first_page() -> None:
    repo = FakeRepository(documents=_documents(25))

    result = asyncio.run(InsightQueryService(repo).search())

    assert len(result.data) == 10
    assert result.total == 25
    assert result.page == 1
    assert result.per_page == 10
    assert result.total_pages == math.ceil(25 / 10)
    assert repo.finds[0]["skip"] == 0
    assert repo.finds[0]["limit"] == 10
    assert repo.counts == [pipelines.search_filter("")]


def test_search_later_page_skips() -> None:
    repo = FakeRepository(documents=_documents(25))

    result = asyncio.run(InsightQueryService(repo).search(search="Insight", page=3, limit=10))

    assert len(result.data) == 5
    assert repo.finds[0]["skip"] == 20
    assert repo.finds[0]["filter"] == pipelines.search_filter("Insight")


def test_search_with_no_matches() -> None:
    repo = FakeRepository(documents=[])

    result = asyncio.run(InsightQueryService(repo).search(search="nothing"))

    assert result.data == []
    assert result.total == 0
    assert result.total_pages == 0


def test_search_stringifies_object_ids() -> None:
    oid = ObjectId()
    repo = FakeRepository(documents=[{"_id": oid, "title": "t", "impact": ""}])

    result = asyncio.run(InsightQueryService(repo).search())

    assert result.data[0].id == str(oid)
    assert result.data[0].impact == ""


def test_by_category_honors_sector_first() -> None:
    repo = FakeRepository(documents=_documents(3))
    service = InsightQueryService(repo, categories_limit=10)

    result = asyncio.run(service.by_category(sector="Energy", topic="oil"))

    assert result.status == 1
    assert repo.finds[0]["filter"] == {"sector": {"$regex": "Energy", "$options": "i"}}
    assert repo.finds[0]["limit"] == 10


@pytest.mark.parametrize(
    "error",
    [
        ServerSelectionTimeoutError("No servers found yet"),
        OperationFailure("Invalid $match"),
        KeyError("averageIntensity"),
    ],
)
def test_failures_become_query_failure(error) -> None:
    repo = FakeRepository(error=error)

    with pytest.raises(QueryFailure) as exc_info:
        asyncio.run(InsightQueryService(repo).average_intensity_by_topic())

    assert exc_info.value.message == str(error)
    assert exc_info.value.operation == "average_intensity_by_topic"
    assert exc_info.value.__cause__ is error


def test_malformed_rows_become_query_failure() -> None:
    repo = FakeRepository(rows=[{"_id": "oil"}])

    with pytest.raises(QueryFailure):
        asyncio.run(InsightQueryService(repo).average_intensity_by_topic())
