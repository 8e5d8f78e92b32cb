"""
Main orchestrator for SparkRadar.

Fetches every upstream source for a point, merges them and prints the
response as JSON.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from .diagnostics import Diagnostics
from .documents import NWSDocument
from .fetch_nws import fetch_mapclick, fetch_zone_alerts
from .fetch_owm import fetch_onecall
from .fetch_spc import fetch_spc_outlooks, fetch_mesoscale_discussions
from .merge import parse_weather_data

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_NO_DATA = "NO DATA"
STATUS_FETCH_ERROR = "FETCH ERROR"
STATUS_NOT_FETCHED = "NOT FETCHED"


def get_project_root() -> Path:
    """Get the project root directory."""
    # This file is in sparkradar/, so parent is project root
    return Path(__file__).parent.parent


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from LOG_LEVEL, or DEBUG when verbose."""
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger().setLevel(level)


def fetch_all(lat: float, lon: float) -> Dict[str, Any]:
    """
    Fetch every upstream document for a point.

    Returns:
        Dictionary with the raw documents and a per-source status
    """
    status = {
        "owm": STATUS_NOT_FETCHED,
        "nws": STATUS_NOT_FETCHED,
        "alerts": STATUS_NOT_FETCHED,
    }

    raw_owm = fetch_onecall(lat, lon)
    status["owm"] = STATUS_OK if raw_owm is not None else STATUS_FETCH_ERROR

    raw_nws = fetch_mapclick(lat, lon)
    if raw_nws is None:
        status["nws"] = STATUS_FETCH_ERROR
    elif not raw_nws:
        status["nws"] = STATUS_NO_DATA
    else:
        status["nws"] = STATUS_OK

    # Alerts are looked up by the zone MapClick reports
    raw_alerts = None
    zone = NWSDocument(raw_nws).location.zone
    if status["nws"] == STATUS_OK and zone:
        raw_alerts = fetch_zone_alerts(zone)
        status["alerts"] = STATUS_OK if raw_alerts is not None else STATUS_FETCH_ERROR

    return {
        "status": status,
        "owm": raw_owm,
        "nws": raw_nws,
        "alerts": raw_alerts,
        "spc": fetch_spc_outlooks(),
        "mcd": fetch_mesoscale_discussions(),
    }


def onecall(lat: float, lon: float, diagnostics: Optional[Diagnostics] = None) -> Dict[str, Any]:
    """
    Build the merged response for a point.

    Returns:
        {"status": {...}, "data": {...}}
    """
    logger.info(f"Building forecast for {lat}, {lon}")

    fetched = fetch_all(lat, lon)
    forecast = parse_weather_data(
        point=(lon, lat),
        raw_owm=fetched["owm"],
        raw_nws=fetched["nws"],
        raw_alerts=fetched["alerts"],
        spc_outlooks=fetched["spc"],
        raw_mcd=fetched["mcd"],
        diagnostics=diagnostics,
    )

    return {"status": fetched["status"], "data": forecast.to_dict()}


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SparkRadar - Merged NWS/OpenWeatherMap forecast for a point",
        prog="python -m sparkradar.run",
    )

    parser.add_argument("--lat", type=float, required=True, help="Latitude in decimal degrees")
    parser.add_argument("--lon", type=float, required=True, help="Longitude in decimal degrees")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    configure_logging(args.verbose)

    if not -90 <= args.lat <= 90 or not -180 <= args.lon <= 180:
        parser.error("lat/lon out of range")

    try:
        diagnostics = Diagnostics()
        response = onecall(args.lat, args.lon, diagnostics)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    print(json.dumps(response, indent=args.indent))

    if diagnostics.warnings:
        logger.warning(f"Degraded sections: {', '.join(diagnostics.sections())}")
    sys.exit(0)


if __name__ == "__main__":
    main()
