"""
Momentum Board Read-Only API
FastAPI service: cached market feed proxy plus momentum scoring.

Run with: uvicorn momentum_board.api.app:app
"""
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from momentum_board.core.momentum import AssetSnapshot, score_asset
from momentum_board.core.ranking import TableQuery, build_table, enrich
from momentum_board.data.market_data import MarketDataClient, MarketDataError
from momentum_board.logging_utils import get_board_logger

from .models import (
    AssetInput,
    ErrorResponse,
    HealthResponse,
    MomentumPageResponse,
    MomentumRow,
    ScoreResponse,
)

API_VERSION = "1.0.0"

CACHE_OK = "public, s-maxage=60, stale-while-revalidate=120"
CACHE_ERROR = "public, s-maxage=15, stale-while-revalidate=60"

_logger = get_board_logger("api")

app = FastAPI(
    title="Momentum Board API",
    description="Read-only crypto momentum scores with explanations",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Shared client so the in-memory feed cache survives across requests
_CLIENT: Optional[MarketDataClient] = None


def get_client() -> MarketDataClient:
    global _CLIENT
    if _CLIENT is None:
        _CLIENT = MarketDataClient()
    return _CLIENT


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "Momentum Board API",
        "version": API_VERSION,
        "description": "Explainable momentum scores for crypto assets (not a forecast)",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def get_health():
    return HealthResponse()


@app.get("/markets")
def get_markets(
    per_page: Optional[int] = Query(None, ge=1, le=250),
    client: MarketDataClient = Depends(get_client),
):
    """Proxy of the upstream markets feed (cached)."""
    try:
        payload = client.fetch_markets(per_page)
    except MarketDataError as e:
        return JSONResponse(
            status_code=502,
            content={"error": str(e)},
            headers={"cache-control": CACHE_ERROR},
        )
    return JSONResponse(
        status_code=200,
        content=payload.to_dict(),
        headers={"cache-control": CACHE_OK},
    )


@app.get("/momentum", response_model=MomentumPageResponse)
def get_momentum(
    per_page: Optional[int] = Query(None, ge=1, le=250),
    q: Optional[str] = None,
    high: Optional[str] = None,
    sort: Optional[str] = None,
    sort_dir: Optional[str] = Query(None, alias="dir"),
    page: Optional[str] = None,
    size: Optional[str] = None,
    client: MarketDataClient = Depends(get_client),
):
    """Ranked, filtered and paginated momentum rows."""
    payload = client.fetch_markets(per_page)
    query = TableQuery.from_params(
        {"q": q, "high": high, "sort": sort, "dir": sort_dir, "page": page, "size": size}
    )
    table = build_table(payload.data, query)
    return MomentumPageResponse(
        rows=[MomentumRow(**row.to_dict()) for row in table.rows],
        page=table.page,
        totalPages=table.total_pages,
        total=table.total,
        fetchedAt=payload.fetched_at,
    )


@app.get("/momentum/{asset_id}", response_model=MomentumRow)
def get_asset_momentum(
    asset_id: str,
    per_page: Optional[int] = Query(None, ge=1, le=250),
    client: MarketDataClient = Depends(get_client),
):
    """Breakdown and confidence for one asset in the current feed."""
    payload = client.fetch_markets(per_page)
    for row in enrich(payload.data):
        if row.id == asset_id:
            return MomentumRow(**row.to_dict())
    raise HTTPException(status_code=404, detail=f"Asset {asset_id} not in current market feed")


@app.post("/momentum/score", response_model=ScoreResponse)
async def score_adhoc(body: AssetInput):
    """Score an ad-hoc set of percentage changes without touching the feed."""
    snap = AssetSnapshot(
        id=body.id,
        name=body.name,
        symbol=body.symbol,
        change24h=body.change24h,
        change7d=body.change7d,
        change30d=body.change30d,
    )
    breakdown, confidence = score_asset(snap)
    return ScoreResponse(breakdown=breakdown.to_dict(), confidence=confidence.to_dict())


# Error handlers
@app.exception_handler(MarketDataError)
async def market_data_error_handler(request: Request, exc: MarketDataError):
    """Upstream feed failures surface as 502."""
    _logger.warning(f"API_UPSTREAM_ERROR path={request.url.path} err={exc}")
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(error="UPSTREAM_ERROR", message=str(exc)).model_dump(),
        headers={"cache-control": CACHE_ERROR},
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    """Handle 404 errors with consistent format."""
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(
            error="NOT_FOUND",
            message=str(getattr(exc, "detail", "Not found")),
        ).model_dump(),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("momentum_board.api.app:app", host="0.0.0.0", port=8000)
