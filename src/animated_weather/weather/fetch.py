"""Single-attempt JSON GET used by every provider endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..exceptions import HTTPStatusFailure, NetworkFailure, ParseFailure
from ..redaction import sanitize_text, sanitize_url


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    logger: logging.Logger,
    context: str = "weather",
) -> dict[str, Any]:
    """GET `url` once and return the decoded JSON object.

    Raises NetworkFailure for transport errors and unusable URLs, HTTPStatusFailure for any
    status other than 200 and ParseFailure when the body is not a JSON object.
    Every outcome is logged once; nothing is retried.
    """
    log_context = {"endpoint": context}
    logger.info(
        "Fetching %s data from %s", context, sanitize_url(url, params), extra=log_context
    )
    try:
        response = await client.get(url, params=params)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        detail = sanitize_text(str(exc)) or type(exc).__name__
        logger.error("%s request error: %s", context, detail, extra=log_context)
        raise NetworkFailure(f"Network error: {detail}") from exc

    if response.status_code != 200:
        logger.error(
            "%s API error: %d",
            context,
            response.status_code,
            extra={**log_context, "status_code": response.status_code},
        )
        raise HTTPStatusFailure(response.status_code)

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("Error parsing %s data: %s", context, exc, extra=log_context)
        raise ParseFailure("Error parsing weather data") from exc

    if not isinstance(payload, dict):
        logger.error(
            "Error parsing %s data: unexpected payload type %s",
            context,
            type(payload).__name__,
            extra=log_context,
        )
        raise ParseFailure("Error parsing weather data")

    logger.info("%s data received successfully", context, extra=log_context)
    return payload
