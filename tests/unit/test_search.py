"""
Unit tests for search ranking.
"""

import pytest

from idcollection import Collection, Search, Settings, set_config
from idcollection.core.exceptions import InvalidArgumentError


@pytest.fixture
def titles():
    """Collection of dict members with one searchable field."""
    return Collection({
        "p1": {"title": "power plant"},
        "p2": {"title": "power"},
        "p3": {"title": "solar power"},
        "p4": {"title": "wind"},
    })


class TestScoring:
    """Score computation and ranking."""

    def test_exact_prefix_and_contains(self, titles):
        """Test the exact > prefix > contains ranking."""
        result = titles.search("power", {"fields": ["title"]})

        assert result.keys() == ["p2", "p1", "p3"]
        assert result.search_scores == {"p2": 17.0, "p1": 9.0, "p3": 3.0}

    def test_members_without_hits_are_dropped(self, titles):
        """Test that non-matching members are removed."""
        assert "p4" not in titles.search("power")

    def test_case_insensitive(self, titles):
        """Test that matching ignores case."""
        assert titles.search("POWER", {"fields": ["title"]}).keys() == ["p2", "p1", "p3"]

    def test_field_weights(self):
        """Test per-field score multipliers."""
        collection = Collection({
            "x": {"title": "wind", "body": "power"},
            "y": {"title": "power", "body": "wind"},
        })
        result = collection.search(
            "power",
            {"fields": ["title", "body"], "score": {"title": 10}},
        )

        assert result.keys() == ["y", "x"]
        assert result.search_scores == {"y": 170.0, "x": 17.0}

    def test_word_hits(self):
        """Test that single query words score on their own."""
        collection = Collection({
            "m1": {"text": "solar panels"},
            "m2": {"text": "wind and solar"},
            "m3": {"text": "a solar wind farm"},
        })
        result = collection.search("solar wind", {"fields": ["text"]})

        assert result.keys() == ["m3", "m2", "m1"]
        assert result.search_scores == {"m3": 4.0, "m2": 2.0, "m1": 1.0}

    def test_ties_keep_collection_order(self):
        """Test that equal scores keep the original order."""
        collection = Collection({
            "b": {"t": "y power"},
            "a": {"t": "x power"},
        })
        assert collection.search("power", {"fields": ["t"]}).keys() == ["b", "a"]

    def test_min_length(self):
        """Test that short words are ignored."""
        collection = Collection({"k": {"t": "banana"}})

        assert collection.search("a solar", {"fields": ["t"]}).is_empty()
        assert collection.search("a solar", {"fields": ["t"], "min_length": 1}).keys() == ["k"]

    def test_whole_words(self):
        """Test whole-word matching of query words."""
        collection = Collection({"k": {"t": "tsunami"}})

        loose = collection.search("sun", {"fields": ["t"]})
        strict = collection.search("sun", {"fields": ["t"], "words": True})

        assert loose.search_scores == {"k": 3.0}
        assert strict.search_scores == {"k": 2.0}

    def test_words_default_from_settings(self):
        """Test that the configured default applies."""
        set_config(Settings(search_words=True))
        collection = Collection({"k": {"t": "tsunami"}})
        assert collection.search("sun", {"fields": ["t"]}).search_scores == {"k": 2.0}


class TestSearchableData:
    """What gets searched."""

    def test_records_and_id(self, books):
        """Test that record fields and the id are searched."""
        result = books.search("dune")

        assert result.keys() == ["dune"]
        assert result.search_scores["dune"] == 34.0

    def test_restricted_fields(self, books):
        """Test that only the listed fields are searched."""
        assert books.search("austen", {"fields": ["title"]}).is_empty()
        assert books.search("austen", {"fields": ["author.name"]}).keys() == ["emma", "persuasion"]

    def test_list_values(self, books):
        """Test that list fields are searched as text."""
        assert books.search("desert", {"fields": ["tags"]}).keys() == ["dune", "hyperion"]

    def test_scalar_members(self):
        """Test plain string members."""
        collection = Collection(["solar", "wind"])
        assert collection.search("solar").keys() == ["0"]

    def test_plain_objects(self):
        """Test objects without to_dict()."""

        class Note:
            def __init__(self, text):
                self.text = text

        collection = Collection([Note("solar"), Note("wind")])
        assert collection.search("wind").keys() == ["1"]


class TestSearchPolicy:
    """Empty queries and invalid arguments."""

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_empty_query_returns_copy(self, books, query):
        """Test that an empty query returns everything unchanged."""
        result = books.search(query)

        assert result == books
        assert result is not books

    def test_receiver_untouched(self, books):
        """Test that search does not modify the source."""
        books.search("dune")
        assert len(books) == 5

    def test_result_keeps_class_and_parent(self):
        """Test that the result is a collection of the same kind."""
        owner = object()
        result = Collection(["solar"], parent=owner).search("solar")
        assert result.parent is owner

    def test_unknown_option(self, books):
        """Test rejection of unknown options."""
        with pytest.raises(InvalidArgumentError):
            books.search("dune", {"fuzzy": True})

    def test_non_string_query(self, books):
        """Test rejection of non-string queries."""
        with pytest.raises(InvalidArgumentError):
            books.search(42)

    def test_search_collection_classmethod(self, books):
        """Test the class-level entry point."""
        assert Search.collection(books, "emma").keys() == ["emma"]
