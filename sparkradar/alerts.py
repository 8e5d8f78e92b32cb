"""
NWS alert normalization for SparkRadar.

Reshapes api.weather.gov alert features into display-ready alerts with a
color per hazard type.
"""

import logging
from typing import List, Dict, Any, Optional

from .diagnostics import Diagnostics
from .documents import as_dict, as_list, as_text
from .models import Alert

logger = logging.getLogger(__name__)

ALERT_COLORS = {
    "Air Quality Alert": "#768b00",
    "Avalanche Warning": "#ff00ff",
    "Dust Advisory": "#706e00",
    "Dust Storm Warning": "#776b00",
    "Flash Flood Emergency": "#00ff00",
    "Flash Flood Warning": "#00ff00",
    "Flood Advisory": "#00538b",
    "Flood Warning": "#1E90FF",
    "Flood Watch": "#60fd82",
    "Marine Weather Statement": "#690083",
    "PDS Tornado Warning": "#e900dd",
    "Severe Thunderstorm Warning": "#f1a500",
    "Severe Thunderstorm Watch": "#db7093",
    "Snow Squall Warning": "#0096aa",
    "Special Marine Warning": "#8b3300",
    "Special Weather Statement": "#eeff00",
    "Tornado Emergency": "#9f00e9",
    "Tornado Warning": "#e90000",
    "Tornado Watch": "#ffff00",
    "Tropical Storm Watch": "#3f0072",
    "Winter Storm Warning": "#00d4ff",
    "Winter Weather Advisory": "#0087af",
    "Winter Storm Watch": "#00aaff",
    "Ice Storm Warning": "#0047ab",
    "High Wind Warning": "#ff8000",
    "Extreme Cold Warning": "#00ffff",
    "Heat Advisory": "#ff7000",
    "Heat Warning": "#ff2000",
    "Red Flag Warning": "#ff00c8ff",
    "Extreme Wind Warning": "#d400ffff",
}

DEFAULT_WARNING_COLOR = "#FF0000"
DEFAULT_WATCH_COLOR = "#FFA500"
DEFAULT_ALERT_COLOR = "#FFCC00"


def find_color_for_alert(event: Optional[str]) -> str:
    """
    Get the display color for an alert event.

    Args:
        event: Event name, e.g. "Tornado Warning"

    Returns:
        Hex color string
    """
    event = event or ""
    if event in ALERT_COLORS:
        return ALERT_COLORS[event]

    if "Warning" in event:
        return DEFAULT_WARNING_COLOR
    elif "Watch" in event:
        return DEFAULT_WATCH_COLOR
    return DEFAULT_ALERT_COLOR


def flatten_text(text: Optional[str]) -> Optional[str]:
    """Collapse paragraph breaks, then join remaining lines with spaces."""
    if not text:
        return None
    return text.replace("\n\n", "\n").replace("\n", " ")


def is_outlook(event: Optional[str]) -> bool:
    """Outlooks are reported through SPC risks, not alerts."""
    return "outlook" in (event or "").lower()


def normalize_alert(props: Dict[str, Any]) -> Alert:
    """Build an Alert from one feature's properties."""
    event = as_text(props.get("event"))

    return Alert(
        id=as_text(props.get("id")),
        issued=as_text(props.get("sent")),
        start=as_text(props.get("effective")),
        end=as_text(props.get("expires")),
        severity=as_text(props.get("severity")),
        areas=as_text(props.get("areaDesc")),
        event=event,
        color=find_color_for_alert(event),
        headline=as_text(props.get("headline")),
        description=flatten_text(as_text(props.get("description"))),
        instructions=flatten_text(as_text(props.get("instruction"))),
    )


def normalize_alerts(raw_alerts: Any, diagnostics: Optional[Diagnostics] = None) -> List[Alert]:
    """
    Normalize an alert feature collection.

    Outlook products are dropped. A feature that fails to parse is reported
    and skipped; the rest are still processed.

    Args:
        raw_alerts: GeoJSON feature collection from api.weather.gov
        diagnostics: Reporter for per-feature failures

    Returns:
        List of Alert objects
    """
    alerts = []

    for feature in as_list(as_dict(raw_alerts).get("features")):
        try:
            props = feature["properties"]
            if is_outlook(props.get("event")):
                continue
            alerts.append(normalize_alert(props))
        except Exception as e:
            if diagnostics is not None:
                diagnostics.report("alerts", "Unable to parse alert", e)
            else:
                logger.warning(f"Unable to parse alert: {e}")

    logger.debug(f"Normalized {len(alerts)} alerts")
    return alerts
