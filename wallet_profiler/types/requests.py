from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class GraphQLRequest(BaseModel):
    query: Optional[str] = Field(default=None, description="GraphQL query document")
    variables: Optional[Dict[str, Any]] = Field(default=None, description="GraphQL variables")


class AnalyzeRequest(BaseModel):
    address: str = Field(description="Wallet address to analyze (EVM or Solana)")
    networks: Optional[List[str]] = Field(default=None, description="Network enum values to query")
    limit: Optional[int] = Field(default=None, ge=0, le=50, description="Number of recommendations")


class HoldingInput(BaseModel):
    symbol: str = Field(description="Token symbol")
    name: str = Field(default="", description="Token name")
    network_name: str = Field(default="", alias="networkName", description="Network the balance lives on")
    balance: Optional[float] = Field(default=None, description="Token balance")
    balance_usd: Optional[float] = Field(default=None, alias="balanceUsd", description="Balance value in USD")
    price_usd: Optional[float] = Field(default=None, alias="priceUsd", description="Token price in USD")

    model_config = {"populate_by_name": True}


class CandidateInput(BaseModel):
    id: str = Field(description="Catalog id (CoinGecko coin id)")
    symbol: str = Field(description="Token symbol")
    name: str = Field(default="", description="Token name")
    categories: List[str] = Field(default_factory=list, description="Category tags")
    market_cap: Optional[float] = Field(default=None, description="Market cap in USD")
    price_change_24h: Optional[float] = Field(default=None, description="24h price change percentage")
    image: Optional[str] = Field(default=None, description="Logo URL")


class RecommendRequest(BaseModel):
    holdings: List[HoldingInput] = Field(default_factory=list, description="Wallet holdings")
    catalog: Optional[List[CandidateInput]] = Field(
        default=None,
        description="Candidate tokens; defaults to the live catalog",
    )
    limit: Optional[int] = Field(default=None, ge=0, le=50, description="Number of recommendations")
