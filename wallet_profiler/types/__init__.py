from .requests import AnalyzeRequest, CandidateInput, GraphQLRequest, HoldingInput, RecommendRequest
from .responses import AnalyzeResponse, NetworksResponse, RecommendationItem, RecommendationResponse

__all__ = [
    "AnalyzeRequest",
    "CandidateInput",
    "GraphQLRequest",
    "HoldingInput",
    "RecommendRequest",
    "AnalyzeResponse",
    "NetworksResponse",
    "RecommendationItem",
    "RecommendationResponse",
]
