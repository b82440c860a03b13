"""Company name normalization utilities.

This module turns a free-text company name into a comparable form so that
CRM task names and CSV company names can be matched despite differences in
case, punctuation, legal suffixes and generic industry words.

A normalized name has two parts:

- ``tokens``: ordered, de-duplicated words after stop-word removal and
  stemming. Used for token coverage scoring.
- ``fingerprint``: the lowercase name with everything except ASCII letters
  and digits removed. Used for equality and substring tests.
"""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

_SEPARATOR_PATTERN = re.compile(r'[^a-z0-9]+')

DEFAULT_STOP_WORDS = frozenset({
    # Legal and business suffixes
    'inc', 'llc', 'ltd', 'corp', 'corporation', 'co', 'company', 'limited',
    'plc', 'gmbh', 'sa', 's.a.',
    # Connectives
    'the', 'and', 'of', '&',
    # Generic industry words
    'brewing', 'brewery', 'breweries', 'beer', 'ale', 'ales', 'works',
    'beverage', 'beverages', 'bros', 'brothers', 'co-op', 'coop', 'cooperative',
    # Geography that produced false positives
    'city', 'st', 'saint', 'louis',
})

# Stop-words are dropped before stemming, so entries keyed on a default
# stop-word only apply to vocabularies with a smaller stop-word set.
DEFAULT_STEM_MAP = MappingProxyType({
    'coors': 'coors',
    'bier': 'beer',
    'brewers': 'brewer',
    'brewing': 'brew',
    'brewery': 'brew',
    'breweries': 'brew',
    'beverages': 'beverage',
    'ales': 'ale',
    'bros': 'brothers',
})


@dataclass(frozen=True)
class Vocabulary:
    """Fixed word tables used by the normalizer."""

    stop_words: FrozenSet[str] = DEFAULT_STOP_WORDS
    stem_map: Mapping[str, str] = field(default_factory=lambda: DEFAULT_STEM_MAP)

    @classmethod
    def build(cls, stop_words: Iterable[str], stem_map: Optional[Mapping[str, str]] = None) -> 'Vocabulary':
        """Create a vocabulary from plain collections.

        Args:
            stop_words: Words dropped from token sequences
            stem_map: Word -> canonical form replacements

        Returns:
            Immutable vocabulary
        """
        return cls(
            stop_words=frozenset(word.lower() for word in stop_words),
            stem_map=MappingProxyType({k.lower(): v.lower() for k, v in (stem_map or {}).items()}),
        )


DEFAULT_VOCABULARY = Vocabulary()


@dataclass(frozen=True)
class NormalizedName:
    """Comparable representation of a company name."""

    tokens: Tuple[str, ...]
    fingerprint: str

    @property
    def token_set(self) -> FrozenSet[str]:
        return frozenset(self.tokens)

    @property
    def is_empty(self) -> bool:
        return not self.tokens and not self.fingerprint


EMPTY_NAME = NormalizedName(tokens=(), fingerprint='')


def name_fingerprint(name: Optional[str]) -> str:
    """Lowercase a name and strip every non-alphanumeric character.

    Examples:
        >>> name_fingerprint("Schlafly Beer, Inc.")
        'schlaflybeerinc'
        >>> name_fingerprint("  ")
        ''
    """
    if not name:
        return ''
    return _SEPARATOR_PATTERN.sub('', str(name).lower())


class NameNormalizer:
    """Normalize company names against a fixed vocabulary.

    Results are cached per distinct raw name. The cache is an
    ``lru_cache`` so the normalizer can be shared between threads.
    """

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY, cache_size: Optional[int] = 50000):
        """Initialize normalizer.

        Args:
            vocabulary: Stop-words and stem map to apply
            cache_size: Maximum cached names (None for unbounded)
        """
        self.vocabulary = vocabulary
        self._cached_normalize = lru_cache(maxsize=cache_size)(self._normalize)

    def tokenize(self, name: Optional[str]) -> Tuple[str, ...]:
        """Split a name into normalized tokens.

        Applies, in order: lowercasing, separator collapsing, stop-word
        removal, stemming and de-duplication in first-occurrence order.

        Examples:
            >>> NameNormalizer().tokenize("The Saint Louis Brewery dba Schlafly")
            ('dba', 'schlafly')
            >>> NameNormalizer().tokenize("Brewers Brewers Union")
            ('brewer', 'union')
        """
        if not name:
            return ()

        stop_words = self.vocabulary.stop_words
        stem_map = self.vocabulary.stem_map

        tokens = []
        seen = set()
        for word in _SEPARATOR_PATTERN.sub(' ', str(name).lower()).split():
            if word in stop_words:
                continue
            word = stem_map.get(word, word)
            # A stem may land on a stop-word (bier -> beer)
            if word in stop_words or word in seen:
                continue
            seen.add(word)
            tokens.append(word)
        return tuple(tokens)

    def normalize(self, name: Optional[str]) -> NormalizedName:
        """Normalize a raw company name.

        Empty or missing names yield an empty token sequence and an empty
        fingerprint.

        Args:
            name: Raw company name

        Returns:
            NormalizedName for the input
        """
        if name is None:
            return EMPTY_NAME
        return self._cached_normalize(str(name))

    def _normalize(self, name: str) -> NormalizedName:
        normalized = NormalizedName(tokens=self.tokenize(name), fingerprint=name_fingerprint(name))
        logger.debug(f"Normalized {name!r} -> {normalized.tokens} / {normalized.fingerprint!r}")
        return normalized

    def cache_info(self):
        """Expose cache statistics of the underlying lru_cache."""
        return self._cached_normalize.cache_info()


_default_normalizer = NameNormalizer()


def normalize_company_name(name: Optional[str]) -> NormalizedName:
    """Normalize a name with the default vocabulary."""
    return _default_normalizer.normalize(name)
