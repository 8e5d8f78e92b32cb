"""
Typed views over the raw upstream documents.

Every upstream field is optional. The accessor helpers here are the only
place that probes raw dictionaries; the merger works with the dataclasses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .units import safe_float, safe_int


def dig(raw: Any, *path: Any) -> Any:
    """
    Walk nested dicts/lists, returning None at the first missing step.

    Args:
        raw: Parsed JSON value
        path: Dict keys and list indexes

    Returns:
        The value at the path or None
    """
    current = raw
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def as_list(value: Any) -> List[Any]:
    """Return value if it is a list, else an empty list."""
    return value if isinstance(value, list) else []


def as_dict(value: Any) -> Dict[str, Any]:
    """Return value if it is a dict, else an empty dict."""
    return value if isinstance(value, dict) else {}


def as_text(value: Any) -> Optional[str]:
    """Return a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


# OpenWeatherMap One Call

@dataclass
class ModelCurrent:
    temp: Optional[float] = None  # Kelvin
    dew_point: Optional[float] = None  # Kelvin
    humidity: Optional[int] = None
    wind_speed: Optional[float] = None  # m/s
    wind_gust: Optional[float] = None  # m/s
    wind_deg: Optional[int] = None
    clouds: Optional[int] = None
    visibility: Optional[float] = None  # metres
    pressure: Optional[float] = None  # hPa
    sunrise: Optional[float] = None
    sunset: Optional[float] = None
    description: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ModelCurrent":
        raw = as_dict(raw)
        return cls(
            temp=safe_float(raw.get("temp")),
            dew_point=safe_float(raw.get("dew_point")),
            humidity=safe_int(raw.get("humidity")),
            wind_speed=safe_float(raw.get("wind_speed")),
            wind_gust=safe_float(raw.get("wind_gust")),
            wind_deg=safe_int(raw.get("wind_deg")),
            clouds=safe_int(raw.get("clouds")),
            visibility=safe_float(raw.get("visibility")),
            pressure=safe_float(raw.get("pressure")),
            sunrise=safe_float(raw.get("sunrise")),
            sunset=safe_float(raw.get("sunset")),
            description=as_text(dig(raw, "weather", 0, "description")),
        )


@dataclass
class ModelMinute:
    dt: Optional[float] = None
    precipitation: Optional[float] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ModelMinute":
        raw = as_dict(raw)
        return cls(dt=safe_float(raw.get("dt")), precipitation=safe_float(raw.get("precipitation")))


@dataclass
class ModelHour:
    dt: Optional[float] = None
    temp: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_deg: Optional[int] = None
    clouds: Optional[int] = None
    pop: Optional[float] = None  # 0..1
    description: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ModelHour":
        raw = as_dict(raw)
        return cls(
            dt=safe_float(raw.get("dt")),
            temp=safe_float(raw.get("temp")),
            feels_like=safe_float(raw.get("feels_like")),
            humidity=safe_int(raw.get("humidity")),
            wind_speed=safe_float(raw.get("wind_speed")),
            wind_deg=safe_int(raw.get("wind_deg")),
            clouds=safe_int(raw.get("clouds")),
            pop=safe_float(raw.get("pop")),
            description=as_text(dig(raw, "weather", 0, "description")),
        )


@dataclass
class ModelDay:
    dt: Optional[float] = None
    sunrise: Optional[float] = None
    sunset: Optional[float] = None
    temp_max: Optional[float] = None
    temp_min: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_deg: Optional[int] = None
    description: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ModelDay":
        raw = as_dict(raw)
        return cls(
            dt=safe_float(raw.get("dt")),
            sunrise=safe_float(raw.get("sunrise")),
            sunset=safe_float(raw.get("sunset")),
            temp_max=safe_float(dig(raw, "temp", "max")),
            temp_min=safe_float(dig(raw, "temp", "min")),
            wind_speed=safe_float(raw.get("wind_speed")),
            wind_deg=safe_int(raw.get("wind_deg")),
            description=as_text(dig(raw, "weather", 0, "description")),
        )


class ModelDocument:
    """
    Global model (One Call) document.

    Sections are parsed on demand so a malformed array only affects the
    merge section that reads it.
    """

    def __init__(self, raw: Any):
        self.raw = as_dict(raw)

    def current(self) -> ModelCurrent:
        return ModelCurrent.from_raw(self.raw.get("current"))

    def minutely(self) -> List[ModelMinute]:
        return [ModelMinute.from_raw(m) for m in as_list(self.raw.get("minutely"))]

    def hourly(self) -> List[ModelHour]:
        return [ModelHour.from_raw(h) for h in as_list(self.raw.get("hourly"))]

    def daily(self) -> List[ModelDay]:
        return [ModelDay.from_raw(d) for d in as_list(self.raw.get("daily"))]


# NWS MapClick

@dataclass
class NWSLocation:
    wfo: Optional[str] = None
    radar: Optional[str] = None
    zone: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "NWSLocation":
        raw = as_dict(raw)
        return cls(
            wfo=as_text(raw.get("wfo")),
            radar=as_text(raw.get("radar")),
            zone=as_text(raw.get("zone")),
        )


@dataclass
class NWSObservation:
    """Latest station observation in US units."""
    temp_f: Optional[float] = None
    dewpoint_f: Optional[float] = None
    wind_mph: Optional[float] = None
    gust_mph: Optional[float] = None
    wind_dir: Optional[int] = None
    visibility_mi: Optional[float] = None
    pressure_inhg: Optional[float] = None
    weather: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "NWSObservation":
        raw = as_dict(raw)
        return cls(
            temp_f=safe_float(raw.get("Temp")),
            dewpoint_f=safe_float(raw.get("Dewp")),
            wind_mph=safe_float(raw.get("Winds")),
            gust_mph=safe_float(raw.get("Gust")),
            wind_dir=safe_int(raw.get("Windd")),
            visibility_mi=safe_float(raw.get("Visibility")),
            pressure_inhg=safe_float(raw.get("SLP")),
            weather=as_text(raw.get("Weather")),
        )


@dataclass
class NWSSegment:
    """One day or night period of the MapClick flat forecast series."""
    label: Optional[str] = None  # "High" or "Low"
    weather: Optional[str] = None
    temperature_f: Optional[float] = None
    pop: Optional[int] = None
    text: Optional[str] = None


@dataclass
class NWSSeries:
    """The parallel MapClick arrays, read slot by slot."""
    labels: List[Any] = field(default_factory=list)
    weather: List[Any] = field(default_factory=list)
    temperature: List[Any] = field(default_factory=list)
    pop: List[Any] = field(default_factory=list)
    text: List[Any] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: Any) -> "NWSSeries":
        return cls(
            labels=as_list(dig(raw, "time", "tempLabel")),
            weather=as_list(dig(raw, "data", "weather")),
            temperature=as_list(dig(raw, "data", "temperature")),
            pop=as_list(dig(raw, "data", "pop")),
            text=as_list(dig(raw, "data", "text")),
        )

    def label(self, index: int) -> Optional[str]:
        return as_text(self._at(self.labels, index))

    def slot(self, index: int) -> Optional[NWSSegment]:
        """Return the segment at index, or None past the end of every array."""
        arrays = (self.labels, self.weather, self.temperature, self.pop, self.text)
        if index < 0 or all(index >= len(a) for a in arrays):
            return None
        return NWSSegment(
            label=self.label(index),
            weather=as_text(self._at(self.weather, index)),
            temperature_f=safe_float(self._at(self.temperature, index)),
            pop=safe_int(self._at(self.pop, index)),
            text=as_text(self._at(self.text, index)),
        )

    @staticmethod
    def _at(values: List[Any], index: int) -> Any:
        return values[index] if 0 <= index < len(values) else None


class NWSDocument:
    """National Weather Service MapClick JSON document."""

    def __init__(self, raw: Any):
        self.raw = as_dict(raw)
        self.location = NWSLocation.from_raw(self.raw.get("location"))
        self.observation = NWSObservation.from_raw(self.raw.get("currentobservation"))
        self.series = NWSSeries.from_raw(self.raw)
