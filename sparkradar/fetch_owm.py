"""
OpenWeatherMap fetcher for SparkRadar.

Fetches the One Call 3.0 document (current, minutely, hourly, daily).
"""

import logging
import os
from typing import Dict, Any, Optional

import requests

from .fetch_nws import get_session, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

ONECALL_URL = "https://api.openweathermap.org/data/3.0/onecall"


def get_api_key() -> str:
    """Get the OpenWeatherMap API key from the environment."""
    api_key = os.getenv("OWM_API_KEY")
    if not api_key:
        raise ValueError("OWM_API_KEY environment variable not set")
    return api_key


def fetch_onecall(
    lat: float,
    lon: float,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> Optional[Dict[str, Any]]:
    """
    Fetch the One Call document for a point.

    Args:
        lat: Latitude
        lon: Longitude
        api_key: API key, defaults to OWM_API_KEY
        session: Optional requests session

    Returns:
        Parsed document or None if the request failed.
    """
    if api_key is None:
        api_key = get_api_key()
    if session is None:
        session = get_session()

    params = {"lat": lat, "lon": lon, "appid": api_key}

    try:
        response = session.get(ONECALL_URL, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    # Exception text can include the request URL, which carries the key
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Error fetching data from OpenWeatherMap: {type(e).__name__}")
        return None
