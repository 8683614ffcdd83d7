# app/services/report_service.py
import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from app.core.logging_config import get_logger
from app.models import AnalysisRequest, Report
from app.services import processing_service

PROXY_PATH = "/api/seo-check"
FETCH_ERROR_MESSAGE = "Failed to fetch SEO data."

logger = get_logger(__name__)

class ReportFetchError(Exception):
    """Raised when the proxy cannot produce a usable PageSpeed response."""

async def fetch_report(client: httpx.AsyncClient, request: AnalysisRequest) -> Report:
    """
    Fetches a PageSpeed response through the proxy and reshapes it into a Report.

    Args:
        client: An HTTP client whose base_url points at the proxy.
        request: The URL and strategy to analyze.

    Returns:
        The extracted field and lab metrics.

    Raises:
        ReportFetchError: On a transport failure, a non-success status, or an
            unusable body.
    """
    params = {"url": request.url, "strategy": request.strategy.value}
    try:
        response = await client.get(PROXY_PATH, params=params)
        response.raise_for_status()
        return processing_service.build_report(response.json())
    except httpx.HTTPStatusError as e:
        raise ReportFetchError(f"Status {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise ReportFetchError(f"Request failed: {e!r}") from e
    except (ValueError, TypeError) as e:
        raise ReportFetchError(f"Unusable response body: {e}") from e

@dataclass
class ReportState:
    """What the report view shows for the current request."""
    request: Optional[AnalysisRequest] = None
    loading: bool = False
    error: str = ""
    report: Optional[Report] = None
    suggestions: List[str] = field(default_factory=list)

class ReportLoader:
    """
    Loads reports one request at a time.

    Every call to load() gets a new token and cancels the fetch that was in
    flight. A response whose token is no longer current is dropped, so a slow
    superseded request can never overwrite a newer report.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client
        self._token = 0
        self._task: Optional[asyncio.Task] = None
        self.state = ReportState()

    async def load(self, request: AnalysisRequest) -> ReportState:
        self._token += 1
        token = self._token
        if self._task is not None and not self._task.done():
            self._task.cancel()

        self.state = ReportState(request=request, loading=True)
        task = asyncio.ensure_future(fetch_report(self._client, request))
        self._task = task

        try:
            report = await task
        except asyncio.CancelledError:
            if token != self._token:
                return self.state
            raise
        except ReportFetchError as e:
            if token != self._token:
                return self.state
            logger.warning("Report fetch failed for %s (%s): %s", request.url, request.strategy.value, e)
            self.state = ReportState(request=request, error=FETCH_ERROR_MESSAGE)
            return self.state

        if token != self._token:
            return self.state
        self.state = ReportState(
            request=request,
            report=report,
            suggestions=processing_service.derive_suggestions(report),
        )
        return self.state

    def cancel(self) -> None:
        """Drops whatever is in flight; the current state is left as is."""
        self._token += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
