"""
Forecast merger for SparkRadar.

Reads the OpenWeatherMap One Call and NWS MapClick documents and merges them
into a single response. NWS is the primary source wherever it has data; the
model fills the gaps. Alerts, SPC risks and mesoscale discussions are
composed in at the top level.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional, TypeVar

import pytz

from .alerts import normalize_alerts
from .conditions import classify, classify_or_unknown
from .diagnostics import Diagnostics
from .documents import ModelDocument, ModelDay, NWSDocument, NWSSegment, NWSSeries
from .geo import Point
from .mesoscale import filter_mesoscale_discussions
from .models import (
    Condition, CurrentConditions, DayForecast, HourForecast, Location,
    MinuteForecast, NightForecast, NormalizedForecast,
)
from .risk import resolve_risks
from .units import (
    SENTINEL_KELVIN, epoch_to_date, epoch_to_iso, f_to_k, inhg_to_hpa,
    m_to_km, mi_to_km, mph_to_ms, rounded, validate_reading,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SegmentState(Enum):
    """Position of the cursor in the NWS day/night series."""
    AWAITING_DAY = "AwaitingDay"  # "High" slot: a day/night pair follows
    AWAITING_NIGHT = "AwaitingNight"  # "Low" slot: night only
    EXHAUSTED = "Exhausted"  # no usable label


@dataclass
class SegmentPair:
    state: SegmentState
    day: Optional[NWSSegment] = None
    night: Optional[NWSSegment] = None


class SegmentCursor:
    """
    Walks the NWS flat forecast series alongside the model's calendar days.

    The series is time-ordered day and night periods, so it does not line up
    one-to-one with calendar days. Each take() consumes the periods for one
    calendar day: two for a High/Low pair, one for a lone Low, and one
    (skipped) otherwise.
    """

    def __init__(self, series: NWSSeries):
        self.series = series
        self.index = 0

    @property
    def state(self) -> SegmentState:
        label = self.series.label(self.index)
        if label == "High":
            return SegmentState.AWAITING_DAY
        if label == "Low":
            return SegmentState.AWAITING_NIGHT
        return SegmentState.EXHAUSTED

    def take(self) -> SegmentPair:
        state = self.state

        if state is SegmentState.AWAITING_DAY:
            pair = SegmentPair(state, day=self.series.slot(self.index), night=self.series.slot(self.index + 1))
            self.index += 2
        elif state is SegmentState.AWAITING_NIGHT:
            pair = SegmentPair(state, night=self.series.slot(self.index))
            self.index += 1
        else:
            pair = SegmentPair(state)
            self.index += 1

        return pair


def _kelvin(kelvin: Optional[float]) -> Optional[float]:
    return validate_reading(kelvin, sentinel=SENTINEL_KELVIN)


def _kelvin_from_nws(fahrenheit: Optional[float]) -> Optional[float]:
    return _kelvin(f_to_k(fahrenheit))


def _first(*values: Optional[T]) -> Optional[T]:
    return next((v for v in values if v is not None), None)


def _run_section(name: str, build: Callable[[], T], default: T, diagnostics: Diagnostics) -> T:
    try:
        return build()
    except Exception as e:
        diagnostics.report(name, f"Unable to parse {name}", e)
        return default


def build_location(model: ModelDocument, nws: NWSDocument) -> Location:
    """Location metadata; epoch 0 sunrise/sunset means absent."""
    current = model.current()
    return Location(
        wfo=nws.location.wfo,
        nearest_radar=nws.location.radar or "international",
        sunrise=epoch_to_iso(current.sunrise) if current.sunrise else None,
        sunset=epoch_to_iso(current.sunset) if current.sunset else None,
    )


def build_current(model: ModelDocument, nws: NWSDocument) -> CurrentConditions:
    """
    Merge current conditions field by field.

    Each NWS reading is converted to metric and validated; an absent or
    sentinel value falls back to the model's reading for that field alone.
    """
    obs = nws.observation
    owm = model.current()

    temperature = rounded(_kelvin_from_nws(obs.temp_f))
    dew_point = rounded(_kelvin_from_nws(obs.dewpoint_f))
    wind_speed = validate_reading(mph_to_ms(obs.wind_mph))
    wind_gust = validate_reading(mph_to_ms(obs.gust_mph))
    visibility = validate_reading(mi_to_km(obs.visibility_mi))
    pressure = rounded(validate_reading(inhg_to_hpa(obs.pressure_inhg)))

    return CurrentConditions(
        temperature=_first(temperature, _kelvin(owm.temp)),
        dew_point=_first(dew_point, _kelvin(owm.dew_point)),
        humidity=owm.humidity,
        wind_speed=_first(wind_speed, owm.wind_speed),
        wind_gust=_first(wind_gust, owm.wind_gust),
        wind_direction=_first(obs.wind_dir, owm.wind_deg),
        condition=classify_or_unknown(obs.weather, owm.description),
        cloud_cover=owm.clouds,
        visibility=_first(visibility, validate_reading(m_to_km(owm.visibility))),
        pressure=_first(pressure, validate_reading(owm.pressure)),
    )


def build_minutely(model: ModelDocument) -> List[MinuteForecast]:
    return [
        MinuteForecast(time=epoch_to_iso(minute.dt), precipitation=minute.precipitation or 0.0)
        for minute in model.minutely()
    ]


def build_hourly(model: ModelDocument) -> List[HourForecast]:
    hourly = []

    for hour in model.hourly():
        pop = int(round(hour.pop * 100)) if hour.pop is not None else 0
        hourly.append(HourForecast(
            time=epoch_to_iso(hour.dt),
            condition=classify_or_unknown(hour.description),
            temperature=_kelvin(hour.temp),
            feels_like=_kelvin(hour.feels_like),
            humidity=hour.humidity,
            wind_speed=hour.wind_speed,
            wind_direction=hour.wind_deg,
            cloud_cover=hour.clouds,
            precipitation_probability=pop,
        ))

    return hourly


def build_day(day: ModelDay, pair: SegmentPair) -> DayForecast:
    """
    Merge one model day with the NWS periods consumed for it.

    Args:
        day: Model daily entry (the spine)
        pair: NWS periods taken by the segment cursor

    Returns:
        DayForecast with day and night halves
    """
    if pair.state is SegmentState.AWAITING_DAY:
        day_seg = pair.day or NWSSegment()
        night_seg = pair.night or NWSSegment()
        condition = classify(day_seg.weather) or classify_or_unknown(day.description)
        night_condition = classify_or_unknown(night_seg.weather)
        high = _first(_kelvin_from_nws(day_seg.temperature_f), _kelvin(day.temp_max))
        low = _first(_kelvin_from_nws(night_seg.temperature_f), _kelvin(day.temp_min))
        pop_day, pop_night = day_seg.pop, night_seg.pop
        description = day_seg.text
    elif pair.state is SegmentState.AWAITING_NIGHT:
        night_seg = pair.night or NWSSegment()
        condition = classify_or_unknown(day.description)
        night_condition = classify_or_unknown(night_seg.weather)
        high = _kelvin(day.temp_max)
        low = _first(_kelvin_from_nws(night_seg.temperature_f), _kelvin(day.temp_min))
        pop_day, pop_night = None, night_seg.pop
        description = night_seg.text
    else:
        condition = classify_or_unknown(day.description)
        night_condition = Condition.unknown()
        high, low = _kelvin(day.temp_max), _kelvin(day.temp_min)
        pop_day, pop_night = None, None
        description = None

    return DayForecast(
        date=epoch_to_date(day.dt),
        condition=condition,
        night=NightForecast(condition=night_condition, precipitation_probability=pop_night),
        sunrise=epoch_to_iso(day.sunrise),
        sunset=epoch_to_iso(day.sunset),
        high=high,
        low=low,
        precipitation_probability=pop_day,
        wind_speed=day.wind_speed,
        wind_direction=day.wind_deg,
        description=description,
    )


def build_daily(model: ModelDocument, nws: NWSDocument) -> List[DayForecast]:
    """
    Build the daily forecast with the model's days as the spine.

    Returns:
        One DayForecast per model day
    """
    cursor = SegmentCursor(nws.series)
    daily = []

    for day in model.daily():
        pair = cursor.take()
        logger.debug(f"Daily {epoch_to_date(day.dt)}: {pair.state.value}")
        daily.append(build_day(day, pair))

    return daily


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(pytz.UTC)
    if now.tzinfo is None:
        return pytz.UTC.localize(now)
    return now.astimezone(pytz.UTC)


def parse_weather_data(
    point: Point,
    raw_owm: Any,
    raw_nws: Any,
    raw_alerts: Any = None,
    spc_outlooks: Any = None,
    raw_mcd: Any = None,
    now: Optional[datetime] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> NormalizedForecast:
    """
    Merge all upstream documents into one response for a point.

    Never raises for bad input: a section that fails is left empty and
    reported through diagnostics.

    Args:
        point: (lon, lat) tuple
        raw_owm: One Call document
        raw_nws: MapClick document ({} when NWS has no coverage)
        raw_alerts: api.weather.gov alert feature collection
        spc_outlooks: Day 1-3 categorical outlook feature collections
        raw_mcd: Mesoscale discussion feature collection
        now: Current time for risk dates and MCD expiry (defaults to now)
        diagnostics: Reporter for degraded sections

    Returns:
        NormalizedForecast
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    now = _utc(now)

    model = ModelDocument(raw_owm)
    nws = NWSDocument(raw_nws)

    forecast = NormalizedForecast(
        location=_run_section("location", lambda: build_location(model, nws), Location(), diagnostics),
        current=_run_section("current", lambda: build_current(model, nws), CurrentConditions(), diagnostics),
        alerts=_run_section("alerts", lambda: normalize_alerts(raw_alerts, diagnostics), [], diagnostics),
        mesoscale_discussions=_run_section(
            "mesoscale",
            lambda: filter_mesoscale_discussions(point, raw_mcd, now, diagnostics),
            [],
            diagnostics,
        ),
        spc=_run_section("spc", lambda: resolve_risks(point, spc_outlooks, now), [], diagnostics),
        minutely=_run_section("minutely", lambda: build_minutely(model), [], diagnostics),
        hourly=_run_section("hourly", lambda: build_hourly(model), [], diagnostics),
        daily=_run_section("daily", lambda: build_daily(model, nws), [], diagnostics),
    )

    logger.debug("Parsed weather data.")
    return forecast
