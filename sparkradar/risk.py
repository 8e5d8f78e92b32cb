"""
SPC categorical risk resolution for SparkRadar.

Finds the highest categorical outlook polygon covering the query point for
each forecast day.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Dict, Any, Optional

from .documents import as_dict, as_list
from .geo import Point, point_in_geometry
from .models import RiskRecord, SPCRisk
from .units import ISO_DATE_FORMAT, safe_float

logger = logging.getLogger(__name__)

NO_RISK_DESCRIPTION = "No thunderstorms forecast for this location."

# Sortable severity for the categorical levels. TSTM and anything
# unrecognised rank 0 alongside NONE.
RISK_LEVEL_INDEX = {
    SPCRisk.MRGL: 1,
    SPCRisk.SLGT: 2,
    SPCRisk.ENH: 3,
    SPCRisk.MDT: 4,
    SPCRisk.HIGH: 5,
}


def parse_spc_risk(label: Optional[str]) -> SPCRisk:
    """
    Parse SPC risk label to SPCRisk enum.

    Args:
        label: Risk label from SPC (e.g., "SLGT", "MDT", "HIGH")

    Returns:
        SPCRisk enum value
    """
    if not label or not isinstance(label, str):
        return SPCRisk.NONE

    label_upper = label.upper().strip()

    # Map various label formats to risk levels
    risk_map = {
        "TSTM": SPCRisk.TSTM,
        "GENERAL THUNDER": SPCRisk.TSTM,
        "GENERAL THUNDERSTORMS": SPCRisk.TSTM,
        "MRGL": SPCRisk.MRGL,
        "MARGINAL": SPCRisk.MRGL,
        "SLGT": SPCRisk.SLGT,
        "SLIGHT": SPCRisk.SLGT,
        "ENH": SPCRisk.ENH,
        "ENHANCED": SPCRisk.ENH,
        "MDT": SPCRisk.MDT,
        "MODERATE": SPCRisk.MDT,
        "HIGH": SPCRisk.HIGH,
    }

    return risk_map.get(label_upper, SPCRisk.NONE)


def risk_level_index(label: Optional[str]) -> int:
    """Ordinal severity 1-5 for MRGL..HIGH, 0 for anything else."""
    return RISK_LEVEL_INDEX.get(parse_spc_risk(label), 0)


def _priority(feature: Dict[str, Any]) -> float:
    return safe_float(as_dict(feature.get("properties")).get("DN")) or 0


def resolve_outlook(point: Point, outlook: Any, date: str) -> RiskRecord:
    """
    Resolve one day's categorical outlook at a point.

    Args:
        point: (lon, lat) tuple
        outlook: GeoJSON feature collection for the day
        date: ISO date the outlook is valid for

    Returns:
        RiskRecord for the highest-priority containing polygon, or NONE
    """
    best: Optional[Dict[str, Any]] = None

    for feature in as_list(as_dict(outlook).get("features")):
        if not isinstance(feature, dict):
            continue
        geometry = feature.get("geometry")
        properties = feature.get("properties")
        if not isinstance(geometry, dict) or not isinstance(properties, dict):
            continue

        if not point_in_geometry(point, geometry):
            continue

        if best is None or _priority(feature) > _priority(best):
            best = feature

    if best is None:
        return RiskRecord(date=date, level=SPCRisk.NONE.value, description=NO_RISK_DESCRIPTION)

    props = best["properties"]
    return RiskRecord(
        date=date,
        level=props.get("LABEL"),
        description=props.get("LABEL2"),
        color=props.get("fill"),
        altcolor=props.get("stroke"),
    )


def resolve_risks(point: Point, outlooks: Any, now: datetime) -> List[RiskRecord]:
    """
    Resolve consecutive daily outlooks starting today.

    Args:
        point: (lon, lat) tuple
        outlooks: Ordered list of day 1, 2, 3 feature collections
        now: Current time; record i is dated now's date + i days

    Returns:
        One RiskRecord per outlook document
    """
    risks = []
    today = now.date()

    for i, outlook in enumerate(as_list(outlooks)):
        date = (today + timedelta(days=i)).strftime(ISO_DATE_FORMAT)
        record = resolve_outlook(point, outlook, date)
        logger.debug(f"Day {i + 1} SPC risk at {point}: {record.level}")
        risks.append(record)

    return risks
