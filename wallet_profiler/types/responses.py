from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class RecommendationItem(BaseModel):
    id: str = Field(description="Catalog id")
    symbol: str = Field(description="Token symbol")
    name: str = Field(description="Token name")
    categories: List[str] = Field(default_factory=list, description="Category tags")
    market_cap: Optional[float] = Field(default=None, description="Market cap in USD")
    price_change_24h: Optional[float] = Field(default=None, description="24h price change percentage")
    image: Optional[str] = Field(default=None, description="Logo URL")
    score: int = Field(description="Relevance score")
    matchingTags: List[str] = Field(default_factory=list, description="Portfolio tags that matched")


class RecommendationResponse(BaseModel):
    strategy: str = Field(description="diversified, or top_tokens when nothing matched")
    recommendations: List[RecommendationItem] = Field(default_factory=list)


class AnalyzeResponse(RecommendationResponse):
    address: str = Field(description="Normalized wallet address")
    addressKind: str = Field(description="solana, evm or unknown")
    detectedNetwork: str = Field(description="Display label for the address kind")
    portfolio: Dict[str, Any] = Field(description="Holdings grouped by network with USD totals")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal issues")


class NetworksResponse(BaseModel):
    supportedNetworks: List[Dict[str, str]] = Field(default_factory=list)
    networkIds: List[str] = Field(default_factory=list)
    count: int = Field(description="Number of network ids")
    fromCache: bool = Field(default=False)
    warning: Optional[str] = Field(default=None)
