"""CRM / CSV company reconciliation package."""

from .matcher import NameMatcher, MatchResult, MatchTier, build_candidates
from .utils.normalization import NameNormalizer

__all__ = ['NameMatcher', 'MatchResult', 'MatchTier', 'build_candidates', 'NameNormalizer']
