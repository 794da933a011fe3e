"""Raw flight search against the Kiwi Tequila API."""
from __future__ import annotations

import re
from typing import Any, Dict

import requests

from app.domain import SGD, FlightSearchParams
from app.errors import DataMissing, UpstreamUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="kiwi_client")

session = requests.Session()

KIWI_API_BASE = "https://tequila-api.kiwi.com"
SEARCH_PATH = "/v2/search"
SERVICE_NAME = "kiwi_search"

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def build_search_query(params: FlightSearchParams) -> Dict[str, str]:
    """Translate search params into Tequila query parameters."""
    date_from = params.date_from.isoformat()
    date_to = params.date_to.isoformat()
    query = {
        "fly_from": params.origin,
        "date_from": date_from,
        "date_to": date_to,
        "return_from": date_from,
        "return_to": date_to,
        "curr": SGD,
        "sort": "price",
    }
    if params.destination:
        query["fly_to"] = params.destination
    if params.pax:
        query["adults"] = str(params.pax)
    if params.cabin:
        query["selected_cabins"] = params.cabin
    if params.max_stops is not None:
        query["max_stopovers"] = str(params.max_stops)
    return query


def search_flights_raw(
    params: FlightSearchParams,
    *,
    api_base: str = KIWI_API_BASE,
    api_key: str | None = None,
    timeout: float = 10,
) -> Dict[str, Any]:
    """Return the provider's search document untouched.

    Non-success statuses and transport failures raise UpstreamUnavailable.
    """
    url = f"{api_base.rstrip('/')}{SEARCH_PATH}"
    headers = {"apikey": api_key or ""}
    query = build_search_query(params)
    logger.info("Searching flights", extra={"fly_from": params.origin, "fly_to": params.destination})
    try:
        resp = session.get(url, params=query, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Kiwi search transport error", extra={"error": str(exc)})
        raise UpstreamUnavailable(SERVICE_NAME, detail=str(exc)) from exc

    if not resp.ok:
        logger.warning("Kiwi search failed", extra={"status": resp.status_code})
        raise UpstreamUnavailable(SERVICE_NAME, resp.status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise DataMissing("JSON body", SERVICE_NAME) from exc
    if not isinstance(data, dict):
        raise DataMissing("JSON object", SERVICE_NAME)
    return data


def response_currency(data: Dict[str, Any]) -> str:
    """Currency the provider priced the results in, defaulting to SGD.

    A code that is not three letters is a provider fault, not a bad request.
    """
    search_params = data.get("search_params")
    if not isinstance(search_params, dict):
        search_params = {}
    currency = data.get("currency") or search_params.get("curr") or SGD
    code = str(currency).strip().upper()
    if not _CURRENCY_CODE.match(code):
        logger.warning("Provider returned an unusable currency", extra={"currency": currency})
        raise DataMissing("currency", SERVICE_NAME)
    return code


def response_results(data: Dict[str, Any]) -> list:
    """The raw result records, or an empty list when absent."""
    results = data.get("data")
    return results if isinstance(results, list) else []
