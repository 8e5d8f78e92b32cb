"""
NWS fetcher for SparkRadar.

Fetches the MapClick point forecast/observation document and active alerts
for a forecast zone.
"""

import logging
import os
from typing import Dict, Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

# NWS endpoints
NWS_API_BASE = "https://api.weather.gov"
MAPCLICK_URL = "https://forecast.weather.gov/MapClick.php"

DEFAULT_USER_AGENT = "SparkRadarWXAPI/1.0"
REQUEST_TIMEOUT = 30


def get_session(accept: Optional[str] = None) -> requests.Session:
    """Create a requests session with retry logic and proper headers."""
    session = requests.Session()

    # Retry configuration
    retry_strategy = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": os.getenv("SPARKRADAR_USER_AGENT", DEFAULT_USER_AGENT),
    })
    if accept:
        session.headers["Accept"] = accept

    return session


def fetch_mapclick(lat: float, lon: float, session: Optional[requests.Session] = None) -> Optional[Dict[str, Any]]:
    """
    Fetch the MapClick JSON document for a point.

    Outside NWS coverage MapClick answers with an HTML page instead of JSON;
    that is reported as an empty document rather than an error.

    Args:
        lat: Latitude
        lon: Longitude
        session: Optional requests session

    Returns:
        Parsed document, {} when NWS has no data for the point, or None if
        the request failed.
    """
    if session is None:
        session = get_session()

    params = {"lat": lat, "lon": lon, "FcstType": "json"}

    try:
        response = session.get(MAPCLICK_URL, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    # requests' JSONDecodeError is also a RequestException, so check it first
    except ValueError:
        logger.debug(f"No NWS data available for lat: {lat}, lon: {lon}")
        return {}
    except requests.exceptions.RequestException as e:
        logger.error(f"Error fetching data from NWS: {e}")
        return None


def fetch_zone_alerts(zone: str, session: Optional[requests.Session] = None) -> Optional[Dict[str, Any]]:
    """
    Fetch active alerts for an NWS forecast zone.

    Args:
        zone: Zone identifier, e.g. "MSZ047"
        session: Optional requests session

    Returns:
        GeoJSON feature collection or None if the request failed.
    """
    if session is None:
        session = get_session(accept="application/geo+json")

    url = f"{NWS_API_BASE}/alerts/active/zone/{zone}"

    try:
        response = session.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        data = response.json()

        logger.info(f"Found {len(data.get('features', []))} active alerts for {zone}")
        return data

    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Error fetching alert data from NWS: {e}")
        return None
