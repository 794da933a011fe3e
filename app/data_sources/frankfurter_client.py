"""SGD exchange rates from the Frankfurter API."""
from __future__ import annotations

import requests

from app.domain import SGD
from app.errors import DataMissing, UpstreamUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="frankfurter_client")

session = requests.Session()

FRANKFURTER_API_BASE = "https://api.frankfurter.app"
SERVICE_NAME = "fx_rates"


def fetch_rate_to_sgd(currency: str, *, api_base: str = FRANKFURTER_API_BASE, timeout: float = 10) -> float:
    """Return how many SGD one unit of ``currency`` buys right now."""
    url = f"{api_base.rstrip('/')}/latest"
    try:
        resp = session.get(url, params={"from": currency, "to": SGD}, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("FX transport error", extra={"currency": currency, "error": str(exc)})
        raise UpstreamUnavailable(SERVICE_NAME, detail=str(exc)) from exc

    if not resp.ok:
        logger.warning("FX fetch failed", extra={"currency": currency, "status": resp.status_code})
        raise UpstreamUnavailable(SERVICE_NAME, resp.status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise DataMissing("JSON body", SERVICE_NAME) from exc

    rates = data.get("rates") if isinstance(data, dict) else None
    rate = rates.get(SGD) if isinstance(rates, dict) else None
    if isinstance(rate, bool) or not isinstance(rate, (int, float)) or rate <= 0:
        raise DataMissing(f"{SGD} rate", SERVICE_NAME)
    logger.debug("Fetched FX rate", extra={"currency": currency, "rate": rate})
    return float(rate)
