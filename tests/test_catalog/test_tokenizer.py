"""Tests for the tokenizer."""

from shelf_mcp.catalog import Entity, RepositoryMeta
from shelf_mcp.catalog.tokenizer import iter_tokens, searchable_text, tokenize, tokenize_query


class TestTokenize:
    def test_lowercases_and_splits_on_punctuation(self):
        assert tokenize("React-Dashboard: Admin/UI") == ["react", "dashboard", "admin"]

    def test_drops_tokens_of_two_characters_or_less(self):
        assert tokenize("an ML toolkit in Go") == ["toolkit"]

    def test_preserves_order_and_duplicates(self):
        assert tokenize("game engine game") == ["game", "engine", "game"]

    def test_empty_text(self):
        assert tokenize("") == []
        assert tokenize("  ,;  ") == []

    def test_is_deterministic(self):
        text = "Three.js WebGL renderer, v2 (beta)"
        assert tokenize(text) == tokenize(text)

    def test_iter_tokens_is_lazy(self):
        tokens = iter_tokens("alpha beta gamma")
        assert next(tokens) == "alpha"


class TestTokenizeQuery:
    def test_keeps_two_letter_words(self):
        assert tokenize_query("ML library") == ["ml", "library"]

    def test_drops_single_characters(self):
        assert tokenize_query("a b react") == ["react"]

    def test_strips_punctuation(self):
        assert tokenize_query("react!!") == ["react"]


class TestSearchableText:
    def test_includes_every_indexed_field(self):
        entity = Entity(
            id="e1",
            title="Title",
            author="Author",
            subtitle="Subtitle",
            description="Description",
            tags=["TagOne"],
            readme="Readme Body",
            meta=RepositoryMeta(language="Rust", topics=["TopicOne"]),
        )
        text = searchable_text(entity)

        for word in ("title", "subtitle", "description", "author", "tagone", "topicone", "rust", "readme body"):
            assert word in text
        assert text == text.lower()

    def test_handles_missing_optional_fields(self):
        entity = Entity(id="e1", title="Bare")
        assert tokenize(searchable_text(entity)) == ["bare"]
