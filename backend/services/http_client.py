"""Shared HTTP access to third-party search providers.

All provider calls go through one ``requests.Session`` and one GET helper so
that status-code mapping and logging are identical for every provider.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from services.errors import (
    ProviderAuthError,
    ProviderBadRequest,
    ProviderError,
    ProviderRateLimited,
    ProviderTimeout,
)

logger = logging.getLogger(__name__)
_session = requests.Session()

_SECRET_PARAMS = {"api_key"}


def redact_params(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``params`` safe to log."""
    return {k: ("<redacted>" if k in _SECRET_PARAMS else v) for k, v in params.items()}


def _error_message(resp: requests.Response) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200] if resp.text else None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None


def _raise_for_status(resp: requests.Response, provider: str) -> None:
    status = resp.status_code
    if status < 400:
        return
    message = _error_message(resp)
    logger.warning("%s responded %s: %s", provider, status, message)
    if status == 400:
        raise ProviderBadRequest(details=message)
    if status in (401, 403):
        raise ProviderAuthError(details=message)
    if status == 429:
        raise ProviderRateLimited(details=message)
    if status in (408, 504):
        raise ProviderTimeout(details=message)
    raise ProviderError(details=message or f"{provider} returned HTTP {status}")


def provider_get(
    url: str,
    *,
    params: dict[str, Any],
    timeout: float,
    provider: str,
) -> dict[str, Any]:
    """GET ``url`` and return the decoded JSON object.

    Raises a ``ProviderError`` subclass on transport failures, HTTP error
    statuses and undecodable bodies.
    """
    logger.info("Requesting %s: %s", provider, redact_params(params))
    try:
        resp = _session.get(url, params=params, timeout=timeout)
    except requests.Timeout as exc:
        logger.warning("%s request timed out after %ss", provider, timeout)
        raise ProviderTimeout(details=str(exc)) from exc
    except requests.RequestException as exc:
        logger.warning("%s request failed: %s", provider, exc)
        raise ProviderError(details=str(exc)) from exc

    _raise_for_status(resp, provider)

    try:
        data = resp.json()
    except ValueError as exc:
        logger.warning("%s returned a non-JSON body", provider)
        raise ProviderError(details=f"{provider} returned an invalid response") from exc
    if not isinstance(data, dict):
        raise ProviderError(details=f"{provider} returned an unexpected response")
    logger.debug("%s response keys: %s", provider, sorted(data.keys()))
    return data
