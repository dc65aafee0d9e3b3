"""
FastAPI application for the J-Quants Screening API.

Exposes screening data via HTTP endpoints with auto-generated
OpenAPI documentation at /docs.
"""

import logging
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sources.jquants.errors import ConfigurationError, JQuantsError

from .config import settings
from .data_access import ScreeningDataAccess
from .models import (
    DailyQuotesResponse,
    ErrorResponse,
    HealthResponse,
    ListedInfoResponse,
    ScreeningResponse,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared across requests so the ID token cache is reused
data = ScreeningDataAccess()


@app.exception_handler(JQuantsError)
async def jquants_error_handler(request: Request, exc: JQuantsError):
    """Missing configuration is our fault (500); anything upstream is a bad gateway (502)."""
    status_code = 500 if isinstance(exc, ConfigurationError) else 502
    logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), error_type=type(exc).__name__).model_dump(),
    )


# ----------------------------------------------------------------
# Health
# ----------------------------------------------------------------

@app.get("/", response_model=HealthResponse, tags=["Health"])
def root():
    """API health check and configuration summary."""
    return {
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "status": "healthy",
        "market_code": data.settings.market_code,
        "delay_days": data.settings.delay_days,
    }


# ----------------------------------------------------------------
# Stocks
# ----------------------------------------------------------------

@app.get(
    "/api/stocks",
    response_model=Union[ScreeningResponse, ListedInfoResponse, DailyQuotesResponse],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    tags=["Stocks"],
)
async def get_stocks(
    action: str = Query("screening", description="screening | listed | quotes"),
    date: Optional[str] = Query(None, description="Trading date YYYY-MM-DD (action=quotes)"),
):
    """
    Screening data for the dashboard.

    - **action=screening**: listing joined with the latest daily quotes, with PER/PBR
    - **action=listed**: listed companies on the configured market
    - **action=quotes**: daily quotes for **date**
    """
    if action == "screening":
        snapshot = await data.get_screening_data()
        return ScreeningResponse(stocks=snapshot.stocks, date=snapshot.date, count=snapshot.count)

    if action == "listed":
        info = await data.get_listed_info()
        return ListedInfoResponse(info=info, count=len(info))

    if action == "quotes":
        if not date:
            raise HTTPException(status_code=400, detail="date parameter required")
        quotes = await data.get_daily_quotes(date)
        return DailyQuotesResponse(quotes=quotes, count=len(quotes))

    raise HTTPException(status_code=400, detail="Invalid action")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="info"
    )
