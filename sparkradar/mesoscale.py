"""
SPC mesoscale discussion filtering for SparkRadar.

Keeps only discussions whose polygon covers the query point and that have
not yet expired.
"""

import logging
import re
from datetime import datetime
from typing import List, Any, Optional

import pytz

from .diagnostics import Diagnostics
from .documents import as_dict, as_list, as_text
from .geo import Point, point_in_geometry
from .models import MesoscaleDiscussion
from .units import format_instant, safe_float, safe_int

logger = logging.getLogger(__name__)

HHMM_PATTERN = re.compile(r"^\d{4}$")


def parse_issued(value: Any) -> Optional[datetime]:
    """
    Parse the idp_filedate field.

    MapServer returns dates as epoch milliseconds; ISO strings are also
    accepted.
    """
    millis = safe_float(value)
    if millis is not None:
        try:
            return datetime.fromtimestamp(millis / 1000, tz=pytz.UTC)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = pytz.UTC.localize(parsed)
        return parsed.astimezone(pytz.UTC)

    return None


def parse_expiry(folderpath: Optional[str], issued: Optional[datetime]) -> Optional[datetime]:
    """
    Build the expiry instant from "... Till HHMM UTC" and the issue date.

    The feed only gives the clock time, so the UTC date comes from the issue
    timestamp. Returns None when either part is unusable.

    Args:
        folderpath: Text such as "MD 0045 Active Till 2345 UTC"
        issued: Issue time of the discussion

    Returns:
        Aware UTC expiry datetime or None
    """
    if not folderpath or "Till" not in folderpath or issued is None:
        return None

    time_str = folderpath.split("Till", 1)[1].replace("UTC", "").strip()
    if not HHMM_PATTERN.match(time_str):
        logger.debug(f"Unrecognised MCD expiry time: {time_str!r}")
        return None

    hour, minute = int(time_str[:2]), int(time_str[2:])
    try:
        return issued.astimezone(pytz.UTC).replace(hour=hour, minute=minute, second=0, microsecond=0)
    except ValueError:
        logger.debug(f"Invalid MCD expiry clock time: {time_str}")
        return None


def parse_md_number(name: Optional[str]) -> Optional[int]:
    """Discussion number from a name like "MD 0045"."""
    if not name:
        return None
    return safe_int(name.replace("MD ", "").strip()) or None


def filter_mesoscale_discussions(
    point: Point,
    raw_mcd: Any,
    now: datetime,
    diagnostics: Optional[Diagnostics] = None,
) -> List[MesoscaleDiscussion]:
    """
    Filter mesoscale discussions to those active at the point.

    Args:
        point: (lon, lat) tuple
        raw_mcd: GeoJSON feature collection, optionally wrapped as {"data": ...}
        now: Current aware time
        diagnostics: Reporter for a failed pass

    Returns:
        Discussions covering the point that have not expired. Any error
        during the pass yields an empty list.
    """
    discussions = []
    if now.tzinfo is None:
        now = pytz.UTC.localize(now)

    try:
        collection = as_dict(raw_mcd)
        if "data" in collection:
            collection = as_dict(collection["data"])

        for feature in as_list(collection.get("features")):
            feature = as_dict(feature)
            geometry = feature.get("geometry")
            if not geometry:
                continue

            props = as_dict(feature.get("properties"))
            folderpath = as_text(props.get("folderpath"))
            issued = parse_issued(props.get("idp_filedate"))
            expires = parse_expiry(folderpath, issued)

            if not point_in_geometry(point, geometry):
                continue

            # Unknown expiry keeps the discussion
            if expires is not None and now > expires:
                continue

            discussions.append(MesoscaleDiscussion(
                geometry=geometry,
                number=parse_md_number(as_text(props.get("name"))),
                issued=format_instant(issued) if issued else None,
                expires=format_instant(expires) if expires else None,
                url=as_text(props.get("popupinfo")),
                title=folderpath or as_text(props.get("name")),
            ))

    except Exception as e:
        if diagnostics is not None:
            diagnostics.report("mesoscale", "Unable to parse MCDs", e)
        else:
            logger.warning(f"Unable to parse MCDs: {e}")
        return []

    logger.debug(f"{len(discussions)} active mesoscale discussions at {point}")
    return discussions
