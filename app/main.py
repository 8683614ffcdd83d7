# app/main.py
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from app.core.config import Settings, get_settings
from app.core.logging_config import get_logger, setup_logging
from app.models import AnalysisRequest, ErrorResponse, Strategy
from app.services import pagespeed_service, processing_service, report_service

logger = get_logger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.globals["score_grade"] = processing_service.score_grade

# --- Application Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    if not settings.PAGESPEED_API_KEY:
        logger.warning("PAGESPEED_API_KEY is not set; /api/seo-check will answer 400")

    app.state.http_client = httpx.AsyncClient(timeout=settings.PAGESPEED_TIMEOUT)
    try:
        yield
    finally:
        await app.state.http_client.aclose()

# --- FastAPI App Initialization ---
app = FastAPI(
    title="SearchPilot",
    description="Runs Google PageSpeed Insights for a URL and shows field and lab metrics with suggestions.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Dependencies ---
def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client

def get_proxy_client(request: Request, settings: Settings) -> httpx.AsyncClient:
    """Client the report pages use to reach /api/seo-check."""
    if settings.PROXY_BASE_URL:
        return httpx.AsyncClient(base_url=settings.PROXY_BASE_URL, timeout=settings.PAGESPEED_TIMEOUT)
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=request.app),
        base_url="http://searchpilot.internal",
        timeout=settings.PAGESPEED_TIMEOUT,
    )

# --- API Endpoints ---
@app.get(
    "/api/seo-check",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def seo_check(
    url: Optional[str] = None,
    strategy: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Proxies a PageSpeed Insights run. The API key stays on the server; the
    upstream JSON is returned untouched.
    """
    if not url or not settings.PAGESPEED_API_KEY:
        return JSONResponse(status_code=400, content={"error": "Missing URL or API key"})

    try:
        data = await pagespeed_service.get_pagespeed_insights(
            client, url, settings.PAGESPEED_API_KEY, strategy
        )
    except pagespeed_service.PageSpeedError:
        return JSONResponse(status_code=500, content={"error": "Failed to fetch from PageSpeed API"})

    return JSONResponse(content=data)

# --- Pages ---
@app.get("/", response_class=HTMLResponse)
async def index(request: Request, url: str = ""):
    """The input form. Submitting it opens /report for the entered URL."""
    return templates.TemplateResponse(request, "index.html", {"url": url})

@app.get("/report", response_class=HTMLResponse)
async def report_page(
    request: Request,
    url: str = Query(..., min_length=1),
    strategy: Strategy = Strategy.MOBILE,
    settings: Settings = Depends(get_settings),
):
    """Fetches the report through the proxy and renders metrics and suggestions."""
    analysis = AnalysisRequest(url=url, strategy=strategy)
    async with get_proxy_client(request, settings) as client:
        state = await report_service.ReportLoader(client).load(analysis)

    return templates.TemplateResponse(
        request,
        "report.html",
        {"url": url, "strategy": strategy.value, "strategies": [s.value for s in Strategy], "state": state},
    )
