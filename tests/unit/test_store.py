"""
Unit tests for KeyedStore.
"""

import json

import pytest

from idcollection import KeyedStore
from idcollection.core.exceptions import InvalidArgumentError, InvalidFilterError, InvalidKeyError


@pytest.fixture
def store():
    """Create a store with three keyed entries."""
    return KeyedStore({
        "a": {"name": "alpha", "rank": 3},
        "b": {"name": "beta", "rank": 1},
        "c": {"name": "gamma", "rank": 2},
    })


class TestStoreBasics:
    """Basic access tests."""

    def test_len_and_iter(self, store):
        """Test length and member iteration."""
        assert len(store) == 3
        assert store.count() == 3
        assert [m["name"] for m in store] == ["alpha", "beta", "gamma"]

    def test_keys_values_items(self, store):
        """Test ordered views."""
        assert store.keys() == ["a", "b", "c"]
        assert store.values()[0]["name"] == "alpha"
        assert store.items()[1][0] == "b"

    def test_get_and_find(self, store):
        """Test lookups with defaults."""
        assert store.get("a")["rank"] == 3
        assert store.get("x", "default") == "default"
        assert store.find("x") is None

    def test_first_last_nth(self, store):
        """Test positional access."""
        assert store.first()["name"] == "alpha"
        assert store.last()["name"] == "gamma"
        assert store.nth(1)["name"] == "beta"
        assert store.nth(10) is None

    def test_empty_store(self):
        """Test an empty store."""
        store = KeyedStore()
        assert store.is_empty()
        assert store.first() is None
        assert store.last() is None

    def test_contains_never_raises(self, store):
        """Test membership with non-string keys."""
        assert "a" in store
        assert 1 not in store
        assert None not in store

    def test_item_access(self, store):
        """Test subscript access."""
        store["d"] = {"name": "delta"}
        assert store["d"]["name"] == "delta"

        del store["d"]
        assert "d" not in store

        with pytest.raises(KeyError):
            store["missing"]

    def test_equality(self, store):
        """Test equality on ordered items."""
        assert store == store.clone()
        assert store != store.sort_by("rank")


class TestStoreMutation:
    """In-place mutation tests."""

    def test_set_overwrites_in_place(self, store):
        """Test that overwriting keeps the position."""
        store.set("a", {"name": "changed"})
        assert store.keys() == ["a", "b", "c"]
        assert store["a"]["name"] == "changed"

    def test_set_accepts_int_keys(self):
        """Test that integer keys are stored as strings."""
        store = KeyedStore().set(5, "x")
        assert store.keys() == ["5"]

    @pytest.mark.parametrize("key", [None, 1.5, True, ("a",)])
    def test_set_invalid_key(self, key):
        """Test rejection of unsupported key types."""
        with pytest.raises(InvalidKeyError):
            KeyedStore().set(key, "x")

    def test_append_positional(self):
        """Test positional keys."""
        store = KeyedStore().append("x").append("y")
        assert store.keys() == ["0", "1"]

    def test_positional_key_after_numeric_key(self):
        """Test that positional keys follow the largest numeric key."""
        store = KeyedStore({"7": "x", "name": "y"})
        store.append("z")
        assert store.keys() == ["7", "name", "8"]

    def test_positional_key_never_reused(self):
        """Test that removing the last slot does not free its number."""
        store = KeyedStore().append("x").append("y")
        store.unset("1")
        store.append("z")
        assert store.keys() == ["0", "2"]

    @pytest.mark.parametrize("key", ["²", "①", "٣"])
    def test_non_ascii_digit_keys(self, key):
        """Test that unicode digit keys are plain keys, not positional slots."""
        store = KeyedStore().set(key, "x").append("y")
        assert store.keys() == [key, "0"]

    def test_append_with_key(self, store):
        """Test the two-argument form."""
        store.append("d", {"name": "delta"})
        assert store.keys()[-1] == "d"

    def test_append_arity(self):
        """Test rejection of wrong argument counts."""
        with pytest.raises(TypeError):
            KeyedStore().append()
        with pytest.raises(TypeError):
            KeyedStore().append("a", "b", "c")

    def test_prepend(self, store):
        """Test inserting at the front."""
        store.prepend("z", {"name": "zeta"})
        assert store.keys() == ["z", "a", "b", "c"]

    def test_prepend_existing_key_moves_it(self, store):
        """Test that an existing key moves to the front with its new value."""
        store.prepend("c", {"name": "new"})
        assert store.keys() == ["c", "a", "b"]
        assert store["c"]["name"] == "new"

    def test_prepend_positional(self):
        """Test positional prepend."""
        store = KeyedStore().append("x").prepend("y")
        assert store.keys() == ["1", "0"]

    def test_unset_missing_key(self, store):
        """Test that unsetting a missing key is a no-op."""
        store.unset("missing").remove("also-missing")
        assert len(store) == 3


class TestStoreDerived:
    """Tests for operations returning new stores."""

    def test_clone_is_independent(self, store):
        """Test that clone copies the key map."""
        clone = store.clone()
        clone.unset("a")
        assert "a" in store
        assert type(clone) is KeyedStore

    def test_slice(self, store):
        """Test slicing by offset and limit."""
        assert store.slice(1).keys() == ["b", "c"]
        assert store.slice(0, 2).keys() == ["a", "b"]
        assert store.slice(1, 1).keys() == ["b"]
        assert store.slice(5).keys() == []
        assert store.offset(2).keys() == ["c"]
        assert store.limit(1).keys() == ["a"]

    def test_slice_invalid(self, store):
        """Test rejection of negative or non-integer bounds."""
        with pytest.raises(InvalidArgumentError):
            store.slice(-1)
        with pytest.raises(InvalidArgumentError):
            store.slice(0, "2")

    def test_not(self, store):
        """Test excluding keys."""
        result = store.not_("a", "c", "missing")
        assert result.keys() == ["b"]
        assert store.keys() == ["a", "b", "c"]

    def test_not_invalid_key(self, store):
        """Test rejection of non-string keys."""
        with pytest.raises(InvalidKeyError):
            store.not_(1)

    def test_filter(self, store):
        """Test predicate filtering."""
        result = store.filter(lambda m: m["rank"] > 1)
        assert result.keys() == ["a", "c"]

    def test_filter_by_shapes(self, store):
        """Test the accepted filter_by argument shapes."""
        assert store.filter_by("name", "beta").keys() == ["b"]
        assert store.filter_by("rank", ">=", 2).keys() == ["a", "c"]
        assert store.filter_by({"rank": {"$lt": 3}}).keys() == ["b", "c"]
        assert store.filter_by(lambda m: m["name"].endswith("a")).keys() == ["a", "b", "c"]

    def test_filter_by_unknown_operator(self, store):
        """Test rejection of unknown operators."""
        with pytest.raises(InvalidFilterError):
            store.filter_by("rank", "~~", 2)

    def test_sort_by(self, store):
        """Test sorting."""
        assert store.sort_by("rank").keys() == ["b", "c", "a"]
        assert store.sort_by("rank", "desc").keys() == ["a", "c", "b"]
        assert store.sort_by("rank desc").keys() == ["a", "c", "b"]
        assert store.sort_by(("name", "desc")).keys() == ["c", "b", "a"]

    def test_pluck(self, store):
        """Test collecting one attribute."""
        assert store.pluck("name") == ["alpha", "beta", "gamma"]
        store.set("d", {"name": "alpha"})
        assert store.pluck("name", unique=True) == ["alpha", "beta", "gamma"]


class TestStoreSerialization:
    """Serialization tests."""

    def test_to_dict(self, store):
        """Test ordered dict output."""
        assert list(store.to_dict()) == ["a", "b", "c"]
        assert store.to_dict(lambda m: m["rank"]) == {"a": 3, "b": 1, "c": 2}

    def test_to_list(self, store):
        """Test value list output."""
        assert store.to_list(lambda m: m["name"]) == ["alpha", "beta", "gamma"]

    def test_to_json(self, store):
        """Test JSON output."""
        assert json.loads(store.to_json())["b"]["name"] == "beta"
