"""
SPC (Storm Prediction Center) fetcher for SparkRadar.

Fetches Day 1-3 categorical convective outlooks and active mesoscale
discussions as GeoJSON.
"""

import logging
import os
import time
from typing import List, Dict, Any, Optional

import requests

from .fetch_nws import get_session, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

SPC_OUTLOOK_URL = "https://www.spc.noaa.gov/products/outlook/day{day}otlk_cat.nolyr.geojson"
OUTLOOK_DAYS = (1, 2, 3)

DEFAULT_MCD_URL = "https://mapservices.weather.noaa.gov/vector/rest/services/outlooks/spc_mesoscale_discussion/MapServer/0/query"

REQUEST_DELAY = 0.5


def fetch_spc_outlook(day: int, session: requests.Session) -> Optional[Dict[str, Any]]:
    """
    Fetch one day's categorical outlook.

    Args:
        day: Outlook day (1, 2 or 3)
        session: Requests session

    Returns:
        GeoJSON feature collection or None if failed
    """
    url = SPC_OUTLOOK_URL.format(day=day)

    try:
        response = session.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning(f"Failed to fetch SPC day {day} outlook: {e}")
        return None


def fetch_spc_outlooks(session: Optional[requests.Session] = None) -> List[Dict[str, Any]]:
    """
    Fetch SPC Day 1-3 categorical outlooks.

    A day that fails to load is returned as an empty collection so the list
    stays aligned with consecutive days starting today.

    Returns:
        List of three GeoJSON feature collections
    """
    logger.info("Fetching SPC severe weather outlooks...")

    if session is None:
        session = get_session()
    outlooks = []

    for day in OUTLOOK_DAYS:
        data = fetch_spc_outlook(day, session)
        time.sleep(REQUEST_DELAY)

        if not data:
            data = {"type": "FeatureCollection", "features": []}

        logger.info(f"  Day {day}: {len(data.get('features', []))} risk polygons found")
        outlooks.append(data)

    return outlooks


def fetch_mesoscale_discussions(session: Optional[requests.Session] = None) -> Optional[Dict[str, Any]]:
    """
    Fetch active mesoscale discussion polygons.

    Returns:
        GeoJSON feature collection or None if failed
    """
    if session is None:
        session = get_session()

    params = {
        "where": "1=1",
        "outFields": "*",
        "returnGeometry": "true",
        "f": "geojson",
    }

    try:
        url = os.getenv("SPC_MCD_URL", DEFAULT_MCD_URL)
        response = session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            logger.warning(f"SPC MCD query error: {data['error']}")
            return None

        return data

    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning(f"Failed to fetch SPC mesoscale discussions: {e}")
        return None
