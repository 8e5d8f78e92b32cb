"""
Data models for SparkRadar.

Defines dataclasses for conditions, SPC risks, mesoscale discussions,
alerts, forecasts and the merged response.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum


class SPCRisk(Enum):
    """SPC categorical risk levels."""
    NONE = "NONE"
    TSTM = "TSTM"
    MRGL = "MRGL"
    SLGT = "SLGT"
    ENH = "ENH"
    MDT = "MDT"
    HIGH = "HIGH"


@dataclass(frozen=True)
class Condition:
    """
    Standardized weather state.

    The code digits are sky state (1-8), intensity (0-3) and precipitation
    subtype (0-3). Code 0 is the Unknown record, the only one that carries
    the unparsed source text.
    """
    name: str
    code: int
    raw: Optional[str] = None

    @classmethod
    def unknown(cls, raw: Optional[str] = None) -> "Condition":
        return cls(name="Unknown", code=0, raw=raw)

    @property
    def is_unknown(self) -> bool:
        return self.code == 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "code": self.code}
        if self.is_unknown:
            data["raw"] = self.raw
        return data


@dataclass
class RiskRecord:
    """SPC categorical risk at the query point for one forecast day."""
    date: str
    level: str = SPCRisk.NONE.value
    description: Optional[str] = None
    color: Optional[str] = None
    altcolor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "level": self.level,
            "description": self.description,
            "color": self.color,
            "altcolor": self.altcolor,
        }


@dataclass
class MesoscaleDiscussion:
    """Active SPC mesoscale discussion covering the query point."""
    geometry: Dict[str, Any]
    number: Optional[int] = None
    issued: Optional[str] = None
    expires: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "geometry": self.geometry,
            "number": self.number,
            "issued": self.issued,
            "expires": self.expires,
            "url": self.url,
            "title": self.title,
        }


@dataclass
class Alert:
    """NWS hazard alert, split into identity/timing and display content."""
    id: Optional[str]
    issued: Optional[str]
    start: Optional[str]
    end: Optional[str]
    severity: Optional[str]

    areas: Optional[str]
    event: Optional[str]
    color: Optional[str]
    headline: Optional[str]
    description: Optional[str]
    instructions: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "properties": {
                "id": self.id,
                "issued": self.issued,
                "start": self.start,
                "end": self.end,
                "severity": self.severity,
            },
            "product": {
                "areas": self.areas,
                "event": self.event,
                "color": self.color,
                "headline": self.headline,
                "description": self.description,
                "instructions": self.instructions,
            },
        }


@dataclass
class Location:
    """Location metadata for the query point."""
    wfo: Optional[str] = None
    nearest_radar: str = "international"
    sunrise: Optional[str] = None
    sunset: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wfo": self.wfo,
            "nearest_radar": self.nearest_radar,
            "sunrise": self.sunrise,
            "sunset": self.sunset,
        }


@dataclass
class CurrentConditions:
    """Current conditions, merged from the NWS observation and the model."""
    temperature: Optional[float] = None  # Kelvin
    dew_point: Optional[float] = None  # Kelvin
    humidity: Optional[int] = None  # %
    wind_speed: Optional[float] = None  # m/s
    wind_gust: Optional[float] = None  # m/s
    wind_direction: Optional[int] = None  # degrees
    condition: Condition = field(default_factory=Condition.unknown)
    cloud_cover: Optional[int] = None  # %
    visibility: Optional[float] = None  # km
    pressure: Optional[float] = None  # hPa

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "dew_point": self.dew_point,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "wind_gust": self.wind_gust,
            "wind_direction": self.wind_direction,
            "condition": self.condition.to_dict(),
            "cloud_cover": self.cloud_cover,
            "visibility": self.visibility,
            "pressure": self.pressure,
        }


@dataclass
class MinuteForecast:
    """One minute of precipitation nowcast."""
    time: Optional[str]
    precipitation: float = 0.0  # mm/h

    def to_dict(self) -> Dict[str, Any]:
        return {"time": self.time, "precipitation": self.precipitation}


@dataclass
class HourForecast:
    """Hourly forecast entry."""
    time: Optional[str]
    condition: Condition
    temperature: Optional[float] = None  # Kelvin
    feels_like: Optional[float] = None  # Kelvin
    humidity: Optional[int] = None  # %
    wind_speed: Optional[float] = None  # m/s
    wind_direction: Optional[int] = None  # degrees
    cloud_cover: Optional[int] = None  # %
    precipitation_probability: int = 0  # %

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "temperature": self.temperature,
            "feels_like": self.feels_like,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "wind_direction": self.wind_direction,
            "condition": self.condition.to_dict(),
            "cloud_cover": self.cloud_cover,
            "precipitation_probability": self.precipitation_probability,
        }


@dataclass
class NightForecast:
    """Overnight half of a daily forecast."""
    condition: Condition
    precipitation_probability: Optional[int] = None  # %

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition.to_dict(),
            "precipitation_probability": self.precipitation_probability,
        }


@dataclass
class DayForecast:
    """Forecast for a single calendar day."""
    date: Optional[str]
    condition: Condition
    night: NightForecast
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    high: Optional[float] = None  # Kelvin
    low: Optional[float] = None  # Kelvin
    precipitation_probability: Optional[int] = None  # %
    wind_speed: Optional[float] = None  # m/s
    wind_direction: Optional[int] = None  # degrees
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "condition": self.condition.to_dict(),
            "sunrise": self.sunrise,
            "sunset": self.sunset,
            "high": self.high,
            "low": self.low,
            "precipitation_probability": self.precipitation_probability,
            "wind_speed": self.wind_speed,
            "wind_direction": self.wind_direction,
            "description": self.description,
            "night": self.night.to_dict(),
        }


@dataclass
class NormalizedForecast:
    """Complete merged response for one point."""
    location: Location = field(default_factory=Location)
    current: CurrentConditions = field(default_factory=CurrentConditions)
    alerts: List[Alert] = field(default_factory=list)
    mesoscale_discussions: List[MesoscaleDiscussion] = field(default_factory=list)

    spc: List[RiskRecord] = field(default_factory=list)
    minutely: List[MinuteForecast] = field(default_factory=list)
    hourly: List[HourForecast] = field(default_factory=list)
    daily: List[DayForecast] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the response to a dictionary for JSON serialization."""
        return {
            "location": self.location.to_dict(),
            "current": self.current.to_dict(),
            "alerts": [a.to_dict() for a in self.alerts],
            "mesoscale_discussions": [m.to_dict() for m in self.mesoscale_discussions],
            "forecasts": {
                "spc": [r.to_dict() for r in self.spc],
                "minutely": [m.to_dict() for m in self.minutely],
                "hourly": [h.to_dict() for h in self.hourly],
                "daily": [d.to_dict() for d in self.daily],
            },
        }
