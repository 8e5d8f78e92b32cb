"""
Unit conversion and validation for SparkRadar.

Everything in the merged response is metric: Kelvin, m/s, hPa and km.
The NWS observation arrives in Fahrenheit, mph, inHg and miles.
"""

import math
from datetime import datetime
from typing import Any, Optional

import pytz

# 0 °F converted to Kelvin. The NWS feed reports missing readings as zero, so
# this value is treated as "no data". A genuine 0 °F reading is lost.
SENTINEL_KELVIN = (0 - 32) * 5 / 9 + 273.15

# Upstream documents spell the sentinel with different last digits
# (255.3722222222222 vs 255.37222222222223), so matching is approximate.
SENTINEL_TOLERANCE = 1e-9

# Missing speed, visibility and pressure readings also arrive as zero
SENTINEL_ZERO = 0.0

ISO_INSTANT_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
ISO_DATE_FORMAT = "%Y-%m-%d"


def safe_float(value: Any) -> Optional[float]:
    """Parse a float, returning None instead of raising or producing NaN."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


def safe_int(value: Any) -> Optional[int]:
    """
    Parse an integer, truncating floats and numeric strings like "45.7".

    Returns None (never 0) when the value cannot be parsed.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def validate_reading(value: Optional[float], sentinel: float = SENTINEL_ZERO) -> Optional[float]:
    """
    Return the value, or None if it is non-numeric, NaN or the sentinel.

    Args:
        value: Converted reading
        sentinel: Value the upstream uses to mean "absent"

    Returns:
        The reading or None
    """
    value = safe_float(value)
    if value is None or math.isclose(value, sentinel, rel_tol=0.0, abs_tol=SENTINEL_TOLERANCE):
        return None
    return value


def f_to_k(fahrenheit: Any) -> Optional[float]:
    """Fahrenheit to Kelvin."""
    f = safe_float(fahrenheit)
    if f is None:
        return None
    return (f - 32) * 5 / 9 + 273.15


def k_to_f(kelvin: Any) -> Optional[float]:
    """Kelvin to Fahrenheit."""
    k = safe_float(kelvin)
    if k is None:
        return None
    return (k - 273.15) * 9 / 5 + 32


def mph_to_ms(mph: Any) -> Optional[float]:
    """Miles per hour to metres per second."""
    v = safe_float(mph)
    return None if v is None else v * 0.44704


def inhg_to_hpa(inhg: Any) -> Optional[float]:
    """Inches of mercury to hectopascals."""
    v = safe_float(inhg)
    return None if v is None else v * 33.8639


def mi_to_km(miles: Any) -> Optional[float]:
    """Miles to kilometres."""
    v = safe_float(miles)
    return None if v is None else v * 1.60934


def m_to_km(metres: Any) -> Optional[float]:
    """Metres to kilometres."""
    v = safe_float(metres)
    return None if v is None else v / 1000


def rounded(value: Optional[float], places: int = 2) -> Optional[float]:
    """Round a reading, passing None through."""
    return None if value is None else round(value, places)


# Time conversions

def format_instant(moment: datetime) -> str:
    """Format an aware datetime as an ISO 8601 UTC instant."""
    return moment.astimezone(pytz.UTC).strftime(ISO_INSTANT_FORMAT)


def epoch_to_datetime(seconds: Any) -> Optional[datetime]:
    """Convert epoch seconds to an aware UTC datetime."""
    value = safe_float(seconds)
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value, tz=pytz.UTC)
    except (OverflowError, OSError, ValueError):
        return None


def epoch_to_iso(seconds: Any) -> Optional[str]:
    """Epoch seconds to "YYYY-MM-DDTHH:MM:SSZ", or None if absent."""
    moment = epoch_to_datetime(seconds)
    return format_instant(moment) if moment else None


def epoch_to_date(seconds: Any) -> Optional[str]:
    """Epoch seconds to a UTC calendar date "YYYY-MM-DD"."""
    moment = epoch_to_datetime(seconds)
    return moment.strftime(ISO_DATE_FORMAT) if moment else None
