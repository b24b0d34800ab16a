"""Tests for relevance ranking."""

from datetime import datetime, timedelta, timezone

import pytest

from shelf_mcp.catalog import Entity, RankingWeights, RepositoryMeta, SearchRanking
from shelf_mcp.catalog.models import License
from shelf_mcp.catalog.ranking import (
    array_match_score,
    completeness_score,
    popularity_score,
    recency_score,
    text_match_score,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _updated(days_ago: float) -> Entity:
    return Entity(id="e", title="t", meta=RepositoryMeta(updated_at=NOW - timedelta(days=days_ago)))


@pytest.fixture
def ranking() -> SearchRanking:
    return SearchRanking(clock=lambda: NOW)


class TestTextMatchScore:
    def test_whole_word_at_start(self):
        assert text_match_score("React Dashboard", ["react"]) == 3

    def test_whole_word_not_at_start(self):
        assert text_match_score("Admin React", ["react"]) == 2

    def test_partial_word(self):
        assert text_match_score("my reactor", ["react"]) == 1

    def test_partial_word_at_start(self):
        assert text_match_score("Dashboards", ["dashboard"]) == 2

    def test_sums_over_words(self):
        assert text_match_score("React Dashboard", ["react", "dashboard"]) == 5

    def test_no_match_or_empty(self):
        assert text_match_score("Game Engine", ["react"]) == 0
        assert text_match_score(None, ["react"]) == 0
        assert text_match_score("React", []) == 0


class TestArrayMatchScore:
    def test_exact_and_partial_items(self):
        assert array_match_score(["react", "react-native", "vue"], ["react"]) == 4

    def test_case_insensitive(self):
        assert array_match_score(["React"], ["react"]) == 3

    def test_empty(self):
        assert array_match_score([], ["react"]) == 0
        assert array_match_score(["react"], []) == 0


class TestGeneralFactors:
    @pytest.mark.parametrize(
        "days_ago, expected",
        [(0.5, 1.0), (3, 0.8), (20, 0.6), (60, 0.4), (200, 0.2), (400, 0.1)],
    )
    def test_recency_steps(self, days_ago, expected):
        assert recency_score(_updated(days_ago), NOW) == expected

    def test_recency_without_timestamps(self):
        assert recency_score(Entity(id="e", title="t"), NOW) == 0.0

    def test_recency_falls_back_to_created_at(self):
        entity = Entity(id="e", title="t", meta=RepositoryMeta(created_at=NOW - timedelta(days=3)))
        assert recency_score(entity, NOW) == 0.8

    def test_popularity_zero_without_activity(self):
        assert popularity_score(Entity(id="e", title="t")) == 0.0
        assert popularity_score(Entity(id="e", title="t", meta=RepositoryMeta())) == 0.0

    def test_popularity_saturates(self):
        entity = Entity(id="e", title="t", meta=RepositoryMeta(stars=50_000))
        assert popularity_score(entity) == 1.0

    def test_popularity_grows_with_stars(self):
        low = Entity(id="a", title="t", meta=RepositoryMeta(stars=10))
        high = Entity(id="b", title="t", meta=RepositoryMeta(stars=1000))
        assert 0 < popularity_score(low) < popularity_score(high) < 1

    def test_completeness(self):
        assert completeness_score(Entity(id="e", title="t")) == 0.0
        assert completeness_score(Entity(id="e", title="t", description="d")) == pytest.approx(1 / 6)

        full = Entity(
            id="e",
            title="t",
            description="d",
            readme="r",
            tags=["x"],
            meta=RepositoryMeta(language="Go", topics=["y"], license=License(key="mit", name="MIT")),
        )
        assert completeness_score(full) == 1.0


class TestRankingWeights:
    def test_defaults(self):
        weights = RankingWeights()
        assert weights.title_match == 10
        assert weights.readme_match == 2
        assert weights.completeness == 1

    def test_merged_changes_only_given_fields(self):
        weights = RankingWeights().merged({"title_match": 20}, popularity=0)
        assert weights.title_match == 20
        assert weights.popularity == 0
        assert weights.subtitle_match == 8

    def test_merged_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown ranking weight"):
            RankingWeights().merged(stars=3)


class TestSearchRanking:
    def test_set_weights_is_partial(self, ranking):
        ranking.set_weights(title_match=1)
        weights = ranking.get_weights()
        assert weights.title_match == 1
        assert weights.description_match == 5

    def test_get_weights_returns_copy(self, ranking):
        ranking.get_weights().title_match = 999
        assert ranking.get_weights().title_match == 10

    def test_instances_do_not_share_weights(self):
        first, second = SearchRanking(), SearchRanking()
        first.set_weights(title_match=0)
        assert second.get_weights().title_match == 10

    def test_factors_for_title_match(self, ranking, sample_entities):
        factors = ranking.calculate_factors(sample_entities[0], "React")
        assert factors.title_match == 3
        assert factors.tag_match == 3
        assert factors.topic_match == 3
        assert factors.readme_match == 0

    def test_score_is_zero_without_text_evidence(self, ranking, sample_entities):
        # Popular and complete, but nothing mentions the query
        assert ranking.calculate_relevance_score(sample_entities[1], "react") == 0

    def test_score_includes_general_factors(self, ranking, sample_entities):
        entity = sample_entities[0]
        score = ranking.calculate_relevance_score(entity, "react")
        assert score > ranking.calculate_general_relevance_score(entity) > 0

    def test_rank_drops_zero_scores(self, ranking, sample_entities):
        ranked = ranking.rank_entities(sample_entities, "react")
        assert [e.id for e in ranked] == ["book-1"]

        for entity in sample_entities:
            if entity not in ranked:
                assert ranking.calculate_relevance_score(entity, "react") == 0

    def test_rank_orders_by_score(self, ranking):
        title_hit = Entity(id="title", title="Parser combinators")
        desc_hit = Entity(id="desc", title="Toolkit", description="A parser toolkit")
        ranked = ranking.rank_entities([desc_hit, title_hit], "parser")
        assert [e.id for e in ranked] == ["title", "desc"]

    def test_empty_query_uses_general_relevance(self, ranking, sample_entities):
        ranked = ranking.rank_entities(sample_entities, "   ")
        assert len(ranked) == 3
        scores = [ranking.calculate_general_relevance_score(e) for e in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_zero_text_weights_drop_everything(self, ranking, sample_entities):
        ranking.set_weights(
            {
                name: 0
                for name in (
                    "title_match",
                    "subtitle_match",
                    "description_match",
                    "author_match",
                    "tag_match",
                    "topic_match",
                    "readme_match",
                    "language_match",
                )
            }
        )
        assert ranking.rank_entities(sample_entities, "react") == []
