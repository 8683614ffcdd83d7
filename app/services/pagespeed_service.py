# app/services/pagespeed_service.py
import httpx
from typing import Dict, Any, Optional

from app.core.logging_config import get_logger

API_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

logger = get_logger(__name__)

class PageSpeedError(Exception):
    """Raised for any failure talking to the PageSpeed Insights API."""

async def get_pagespeed_insights(
    client: httpx.AsyncClient,
    url: str,
    api_key: str,
    strategy: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Asynchronously calls the Google PageSpeed Insights API.

    Args:
        client: The shared outbound HTTP client.
        url: The target website URL.
        api_key: The PageSpeed API key.
        strategy: The analysis strategy, forwarded as given. Omitted when None.

    Returns:
        The parsed JSON response, untouched.

    Raises:
        PageSpeedError: If the request fails, the API answers with an error
            status, or the body is not JSON.
    """
    params = {"url": url, "key": api_key}
    if strategy is not None:
        params["strategy"] = strategy

    try:
        response = await client.get(API_ENDPOINT, params=params)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        logger.error("PageSpeed API returned %s for %s", e.response.status_code, url)
        raise PageSpeedError(f"Upstream status {e.response.status_code}") from e
    except httpx.RequestError as e:
        logger.error("Network error while calling PageSpeed API for %s: %r", url, e)
        raise PageSpeedError("Upstream request failed") from e
    except ValueError as e:
        logger.error("Invalid JSON from PageSpeed API for %s: %s", url, e)
        raise PageSpeedError("Upstream body is not JSON") from e
