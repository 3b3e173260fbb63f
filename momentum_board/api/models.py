"""
Pydantic models for Momentum Board API responses.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthResponse(BaseModel):
    """Health status response."""
    ok: bool = True
    timestamp: str = Field(default_factory=_utc_now)


class AssetInput(BaseModel):
    """Ad-hoc asset to score. Missing changes count as 0."""
    id: str = "adhoc"
    name: str = ""
    symbol: str = ""
    change24h: Optional[float] = None
    change7d: Optional[float] = None
    change30d: Optional[float] = None


class MomentumInputsModel(BaseModel):
    c24: float
    c7: float
    c30: float
    volatilityProxy: float


class BreakdownModel(BaseModel):
    score: int = Field(ge=0, le=100)
    inputs: MomentumInputsModel
    drivers: List[str]
    whatWouldChange: List[str]


class ConfidenceModel(BaseModel):
    label: Literal["High", "Medium", "Low"]
    explanation: str


class ScoreResponse(BaseModel):
    breakdown: BreakdownModel
    confidence: ConfidenceModel


class MomentumRow(BaseModel):
    """One ranked asset."""
    id: str
    name: str = ""
    symbol: str = ""
    image: Optional[str] = None
    currentPrice: Optional[float] = None
    change24h: float
    change7d: float
    change30d: float
    score: int
    confidence: ConfidenceModel
    breakdown: BreakdownModel


class MomentumPageResponse(BaseModel):
    rows: List[MomentumRow] = Field(default_factory=list)
    page: int = 1
    totalPages: int = 1
    total: int = 0
    fetchedAt: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    message: str
    timestamp: str = Field(default_factory=_utc_now)
