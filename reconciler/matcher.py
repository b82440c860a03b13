"""Company name matching between CRM tasks and CSV rows.

Matching follows an ordered list of tiers. For every candidate the first
tier whose condition holds decides that candidate's score. The exact,
contains and high-coverage tiers are treated as unambiguous and stop the
scan at once. The best-effort tier only updates the best result seen so
far, because a later candidate may cover the query better.

Every coverage based tier also requires a distinctive overlap: at least one
shared token of four or more characters. Short incidental tokens such as
state abbreviations must never be enough for a match on their own.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .utils.normalization import NameNormalizer, NormalizedName

logger = logging.getLogger(__name__)


class MatchTier(str, Enum):
    """Match confidence classes, strongest first."""

    EXACT = 'exact'
    CONTAINS = 'contains'
    HIGH_COVERAGE = 'high-coverage'
    BEST_EFFORT = 'best-effort'
    NONE = 'none'


@dataclass(frozen=True)
class MatchPolicy:
    """Thresholds used by the matcher."""

    high_coverage: float = 0.9
    best_effort_coverage: float = 0.75
    distinctive_token_length: int = 4
    contains_min_length: int = 8
    contains_score: float = 0.95


DEFAULT_POLICY = MatchPolicy()


@dataclass(frozen=True)
class CandidateRecord:
    """One CSV row that a CRM task may be matched to."""

    display_name: str
    normalized: NormalizedName
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def get(self, column: str) -> Optional[Any]:
        """Cell value for a column, None if absent or empty."""
        value = self.payload.get(column)
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return None
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one name against the candidates."""

    record: Optional[CandidateRecord]
    score: float
    tier: MatchTier

    @property
    def matched(self) -> bool:
        return self.record is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'match': self.record.display_name if self.record else None,
            'score': round(self.score, 2),
            'tier': self.tier.value,
        }


NO_MATCH = MatchResult(record=None, score=0.0, tier=MatchTier.NONE)


def token_coverage(query: NormalizedName, candidate: NormalizedName) -> float:
    """Share of the query's tokens that also appear in the candidate.

    Directional: a candidate with extra tokens still covers the query
    fully. Zero when the query has no tokens.
    """
    query_tokens = query.token_set
    if not query_tokens:
        return 0.0
    return len(query_tokens & candidate.token_set) / len(query_tokens)


def has_distinctive_overlap(query: NormalizedName, candidate: NormalizedName, min_length: int = 4) -> bool:
    """True if the names share at least one token of ``min_length`` or more characters."""
    return any(len(token) >= min_length for token in query.token_set & candidate.token_set)


@dataclass(frozen=True)
class _Comparison:
    """Pairwise measurements shared by all tier conditions."""

    query: NormalizedName
    candidate: NormalizedName
    coverage: float
    distinctive: bool


@dataclass(frozen=True)
class TierRule:
    """One row of the tiered decision table."""

    tier: MatchTier
    condition: Callable[[_Comparison, MatchPolicy], bool]
    score: Callable[[_Comparison, MatchPolicy], float]
    terminates: bool


def _is_exact(c: _Comparison, policy: MatchPolicy) -> bool:
    return bool(c.query.fingerprint) and c.query.fingerprint == c.candidate.fingerprint


def _is_contained(c: _Comparison, policy: MatchPolicy) -> bool:
    a, b = c.query.fingerprint, c.candidate.fingerprint
    if not a or not b:
        return False
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return len(longer) >= policy.contains_min_length and shorter in longer and c.distinctive


def _is_high_coverage(c: _Comparison, policy: MatchPolicy) -> bool:
    return c.coverage >= policy.high_coverage and c.distinctive


def _is_best_effort(c: _Comparison, policy: MatchPolicy) -> bool:
    return c.coverage >= policy.best_effort_coverage and c.distinctive


TIER_RULES: Tuple[TierRule, ...] = (
    TierRule(MatchTier.EXACT, _is_exact, lambda c, p: 1.0, terminates=True),
    TierRule(MatchTier.CONTAINS, _is_contained, lambda c, p: p.contains_score, terminates=True),
    TierRule(MatchTier.HIGH_COVERAGE, _is_high_coverage, lambda c, p: c.coverage, terminates=True),
    TierRule(MatchTier.BEST_EFFORT, _is_best_effort, lambda c, p: c.coverage, terminates=False),
)


class NameMatcher:
    """Find the best CSV candidate for a CRM task name."""

    def __init__(
        self,
        normalizer: Optional[NameNormalizer] = None,
        policy: MatchPolicy = DEFAULT_POLICY,
        rules: Sequence[TierRule] = TIER_RULES
    ):
        """Initialize matcher.

        Args:
            normalizer: Normalizer for query names (shared default if omitted)
            policy: Matching thresholds
            rules: Ordered tier rules, strongest first
        """
        self.normalizer = normalizer or NameNormalizer()
        self.policy = policy
        self.rules = tuple(rules)
        self.logger = logging.getLogger(self.__class__.__name__)

    def compare(self, query: NormalizedName, candidate: NormalizedName) -> Tuple[MatchTier, float, bool]:
        """Classify one query/candidate pair.

        Returns:
            Tuple of (tier, score, terminates). Tier NONE with score 0 when
            no rule applies.
        """
        comparison = _Comparison(
            query=query,
            candidate=candidate,
            coverage=token_coverage(query, candidate),
            distinctive=has_distinctive_overlap(query, candidate, self.policy.distinctive_token_length),
        )
        for rule in self.rules:
            if rule.condition(comparison, self.policy):
                return rule.tier, rule.score(comparison, self.policy), rule.terminates
        return MatchTier.NONE, 0.0, False

    def match(self, query_name: Optional[str], candidates: Iterable[CandidateRecord]) -> MatchResult:
        """Match a name against candidates in their given order.

        Args:
            query_name: Raw name to look up
            candidates: Candidate records

        Returns:
            MatchResult; tier NONE when nothing qualifies
        """
        query = self.normalizer.normalize(query_name)
        best = NO_MATCH

        for candidate in candidates:
            tier, score, terminates = self.compare(query, candidate.normalized)
            if tier is MatchTier.NONE:
                continue
            if terminates:
                self.logger.debug(f"{query_name!r} -> {candidate.display_name!r} ({tier.value}, {score:.2f})")
                return MatchResult(record=candidate, score=score, tier=tier)
            # Strictly greater keeps the first candidate on ties
            if score > best.score:
                best = MatchResult(record=candidate, score=score, tier=tier)

        if best.matched:
            self.logger.debug(f"{query_name!r} -> {best.record.display_name!r} ({best.tier.value}, {best.score:.2f})")
        else:
            self.logger.debug(f"No match for {query_name!r}")
        return best


def build_candidates(
    frame: pd.DataFrame,
    name_column: str,
    normalizer: Optional[NameNormalizer] = None
) -> List[CandidateRecord]:
    """Create candidate records from a loaded CSV table.

    Args:
        frame: Table rows, one candidate per row
        name_column: Column holding the company name
        normalizer: Normalizer used for the names

    Returns:
        Candidates in row order

    Raises:
        ValueError: If the name column is not in the table
    """
    if name_column not in frame.columns:
        raise ValueError(f"CSV header does not include '{name_column}'")

    normalizer = normalizer or NameNormalizer()
    candidates = []
    for row in frame.to_dict(orient='records'):
        name = row.get(name_column) or ''
        candidates.append(CandidateRecord(
            display_name=name,
            normalized=normalizer.normalize(name),
            payload=row,
        ))
    logger.info(f"Built {len(candidates)} match candidates from column '{name_column}'")
    return candidates
