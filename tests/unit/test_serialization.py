"""
Unit tests for collection serialization.
"""

import json

import msgpack
import pytest

from idcollection import Collection, Record
from idcollection.core.exceptions import SerializationError
from idcollection.storage import (
    deserialize_members,
    load_collection,
    serialize_collection,
    serialize_members,
)


class TestSerializeCollection:
    """Encoding collections."""

    def test_msgpack_round_trip(self, books):
        """Test encoding and decoding with msgpack."""
        data = serialize_collection(books)

        assert isinstance(data, bytes)
        assert deserialize_members(data) == books.to_dict()

    def test_json_round_trip(self, books):
        """Test encoding and decoding with JSON."""
        data = serialize_collection(books, format="json")

        assert json.loads(data.decode("utf-8")) == books.to_dict()
        assert list(deserialize_members(data, format="json")) == books.keys()

    def test_msgpack_is_plain_msgpack(self, books):
        """Test that the output is readable with msgpack directly."""
        data = serialize_collection(books)
        assert msgpack.unpackb(data, raw=False)["emma"]["title"] == "Emma"

    def test_map_fn(self, books):
        """Test a custom per-member mapping."""
        data = serialize_collection(books, map_fn=lambda r: r.fields["year"])
        assert deserialize_members(data)["dune"] == 1965

    def test_format_is_case_insensitive(self, books):
        """Test format names."""
        assert serialize_collection(books, format="JSON").startswith(b"{")

    def test_load_collection(self, books):
        """Test rebuilding records."""
        restored = load_collection(serialize_collection(books), Record.from_dict)

        assert restored == books
        assert restored.find("dune").title.unwrap() == "Dune"

    def test_load_without_factory(self):
        """Test that raw values are kept without a factory."""
        original = Collection(["x", {"a": 1}])
        restored = load_collection(serialize_collection(original, format="json"), format="json")
        assert restored.to_dict() == {"0": "x", "1": {"a": 1}}


class TestSerializationErrors:
    """Invalid input."""

    def test_unsupported_format(self, books):
        """Test rejection of unknown formats."""
        with pytest.raises(SerializationError):
            serialize_collection(books, format="xml")
        with pytest.raises(SerializationError):
            deserialize_members(b"{}", format="yaml")

    def test_unserializable_value(self):
        """Test values the encoder cannot handle."""
        with pytest.raises(SerializationError):
            serialize_members({"a": object()})
        with pytest.raises(SerializationError):
            serialize_members({"a": object()}, format="json")

    def test_invalid_bytes(self):
        """Test undecodable data."""
        with pytest.raises(SerializationError):
            deserialize_members(b"not json", format="json")
        with pytest.raises(SerializationError):
            deserialize_members(b"\xc1", format="msgpack")

    def test_non_mapping_payload(self):
        """Test data that decodes to something other than a mapping."""
        with pytest.raises(SerializationError):
            deserialize_members(msgpack.packb([1, 2, 3]))

    def test_empty_data(self):
        """Test that empty input decodes to nothing."""
        assert deserialize_members(b"") == {}
