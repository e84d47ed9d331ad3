"""
Token Recommendation Service

Turns a wallet's holdings and a token catalog into a ranked, diversified
shortlist of tokens the wallet does not hold yet.
"""

from .models import (
    TokenHolding,
    CandidateToken,
    ProfileTagSet,
    ScoredCandidate,
    RecommendationList,
    SelectionStrategy,
    NetworkHoldings,
    PortfolioSummary,
)
from .aggregator import aggregate_portfolio
from .tags import TagExtractor, extract_profile_tags
from .scorer import TokenScorer, ScoringWeights, DEFAULT_WEIGHTS, overlaps
from .selector import select_recommendations, DEFAULT_RECOMMENDATION_COUNT
from .engine import RecommendationEngine, recommend

__all__ = [
    # Models
    "TokenHolding",
    "CandidateToken",
    "ProfileTagSet",
    "ScoredCandidate",
    "RecommendationList",
    "SelectionStrategy",
    "NetworkHoldings",
    "PortfolioSummary",
    # Pipeline
    "aggregate_portfolio",
    "TagExtractor",
    "extract_profile_tags",
    "TokenScorer",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    "overlaps",
    "select_recommendations",
    "DEFAULT_RECOMMENDATION_COUNT",
    "RecommendationEngine",
    "recommend",
]
