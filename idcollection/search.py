"""
Text search over collection members.

Members are scored field by field against the query:

- the whole field equals the query: 16 points and one hit
- the field starts with the query: 8 points and one hit
- otherwise every occurrence of the full query: 2 points, one hit each
- independently, every occurrence of any query word: 1 point and one hit

Points are multiplied by the field weight. Members without hits are
dropped; the rest are ordered by score, highest first, ties keeping their
collection order.

Example:
    >>> result = Search.collection(pages, "solar power", {"fields": ["title", "text"]})
    >>> result.search_scores
    {'notes/solar': 34.0, 'notes/wind': 1.0}
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .config import get_config
from .core.attributes import get_attribute
from .core.exceptions import InvalidArgumentError
from .utils.logging import get_logger

logger = get_logger(__name__)

EXACT_SCORE = 16
PREFIX_SCORE = 8
PHRASE_SCORE = 2


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return " ".join(_to_text(v) for v in value.values())
    if isinstance(value, (list, tuple, set)):
        return " ".join(_to_text(v) for v in value)
    return str(value)


class Search:
    """
    Search query with its options.

    Options:
        fields: Field names to search (default: all member data plus ``id``)
        score: Per-field weight, e.g. ``{"title": 64}`` (default 1)
        min_length: Shortest query word that counts (default from settings)
        words: Match whole words only (default from settings)
    """

    def __init__(self, query: Optional[str], options: Optional[Dict[str, Any]] = None):
        options = dict(options or {})
        settings = get_config()

        if query is not None and not isinstance(query, str):
            raise InvalidArgumentError(
                f"Search query must be a string, got {type(query).__name__}"
            )

        self.query = (query or "").strip()
        self.fields: Optional[List[str]] = options.pop("fields", None) or None
        self.weights: Dict[str, float] = options.pop("score", None) or {}
        self.min_length: int = options.pop("min_length", settings.search_min_length)
        self.words: bool = options.pop("words", settings.search_words)

        if options:
            raise InvalidArgumentError(f"Unknown search options: {sorted(options)}")

        self._lower_query = self.query.lower()
        self._phrase = re.compile(re.escape(self.query), re.IGNORECASE) if self.query else None
        self._word_pattern = self._compile_words()

    def _compile_words(self) -> Optional[re.Pattern]:
        words = [w for w in self._lower_query.split() if len(w) >= self.min_length]
        if not words:
            return None

        alternation = "|".join(re.escape(w) for w in words)
        if self.words:
            return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)
        return re.compile(f"(?:{alternation})", re.IGNORECASE)

    @classmethod
    def collection(cls, collection, query: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        """
        Search a collection.

        Args:
            collection: Collection to search
            query: Free text (empty or None returns an unfiltered copy)
            options: Search options

        Returns:
            New collection with the matching members, best first
        """
        return cls(query, options).run(collection)

    def searchable_data(self, key: str, member: Any) -> Dict[str, Any]:
        """Field values of ``member`` that take part in the search."""
        if isinstance(member, Mapping):
            data = dict(member)
        elif callable(getattr(member, "to_dict", None)):
            data = member.to_dict()
        elif self.fields:
            data = {}
        elif hasattr(member, "__dict__"):
            data = {k: v for k, v in vars(member).items() if not k.startswith("_")}
        else:
            data = {"value": member}

        data.setdefault("id", key)

        if self.fields:
            return {
                f: data[f] if f in data else get_attribute(member, f)
                for f in self.fields
            }
        return data

    def score(self, key: str, member: Any) -> tuple:
        """Return ``(score, hits)`` of a single member."""
        score = 0.0
        hits = 0

        for field, value in self.searchable_data(key, member).items():
            weight = self.weights.get(field, 1)
            text = _to_text(value)
            lower = text.lower()

            if lower == self._lower_query:
                score += EXACT_SCORE * weight
                hits += 1
            elif lower.startswith(self._lower_query):
                score += PREFIX_SCORE * weight
                hits += 1
            else:
                matches = len(self._phrase.findall(text))
                if matches:
                    score += PHRASE_SCORE * weight
                    hits += matches

            if self._word_pattern is not None:
                matches = len(self._word_pattern.findall(text))
                hits += matches
                score += matches * weight

        return score, hits

    def run(self, collection):
        """Apply the search to a collection and return the ranked result."""
        if not self.query:
            return collection.clone()

        items = collection.items()
        scores = np.zeros(len(items), dtype=np.float64)
        hits = np.zeros(len(items), dtype=np.int64)

        for i, (key, member) in enumerate(items):
            scores[i], hits[i] = self.score(key, member)

        matched = np.flatnonzero(hits > 0)
        # stable: equal scores keep collection order
        order = matched[np.argsort(-scores[matched], kind="stable")]

        result = collection.replace_items(items[i] for i in order)
        result.search_scores = {items[i][0]: float(scores[i]) for i in order}

        logger.debug(
            f"Search '{self.query}' matched {len(order)} of {len(items)} members"
        )

        return result
