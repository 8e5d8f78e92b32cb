"""
Weather condition classification for SparkRadar.

Maps free-text descriptions from either forecast source onto a standard
condition name and three-digit code.

Code digits:
    1st: general type (clear=1, mostly clear=2, partly cloudy=3,
         mostly cloudy=4, cloudy=5, precipitation=6, haze=7, fog=8)
    2nd: intensity (n/a=0, light=1, moderate=2, heavy=3)
    3rd: subtype (n/a=0, snow=1, rain=2, storm=3)
"""

import logging
from typing import List, Optional, Tuple, Union

from .models import Condition

logger = logging.getLogger(__name__)

# A rule is (keywords, outcome). Keywords match when any of them is a
# substring of the lowercased text; an empty tuple always matches. The outcome
# is either a (name, code) pair or a nested list of rules. The first matching
# rule at each level wins, and a matched branch with no matching sub-rule
# classifies as None.
Outcome = Union[Tuple[str, int], List["Rule"]]
Rule = Tuple[Tuple[str, ...], Outcome]

ALWAYS: Tuple[str, ...] = ()


def _by_intensity(light: Tuple[str, int], heavy: Tuple[str, int], moderate: Tuple[str, int]) -> List[Rule]:
    return [
        (("light",), light),
        (("heavy",), heavy),
        (ALWAYS, moderate),
    ]


CONDITION_RULES: List[Rule] = [
    (("shower",), [
        (("light",), [
            (("rain",), ("Light Rain Showers", 612)),
            (("snow",), ("Light Snow Showers", 611)),
        ]),
        (("heavy",), [
            (("rain",), ("Heavy Rain Showers", 632)),
            (("snow",), ("Heavy Snow Showers", 631)),
        ]),
        (ALWAYS, [
            (("rain",), ("Rain Showers", 622)),
            (("snow",), ("Snow Showers", 621)),
        ]),
    ]),
    (("rain",), _by_intensity(("Light Rain", 611), ("Heavy Rain", 613), ("Rain", 612))),
    (("snow",), _by_intensity(("Light Snow", 621), ("Heavy Snow", 623), ("Snow", 622))),
    (("storm", "thunder"), _by_intensity(("Light Storm", 631), ("Heavy Storm", 633), ("Storm", 632))),
    (("fog", "mist"), ("Fog", 800)),
    (("haze", "hazy"), ("Haze", 700)),
    (("cloud",), [
        (("mostly",), ("Mostly Cloudy", 540)),
        (("partly", "broken"), ("Partly Cloudy", 330)),
        (ALWAYS, ("Cloudy", 500)),
    ]),
    (("clear", "sun", "fair"), [
        (("mostly",), ("Mostly Clear", 240)),
        (("partly",), ("Partly Cloudy", 330)),
        (ALWAYS, ("Clear", 100)),
    ]),
]


def _matches(text: str, keywords: Tuple[str, ...]) -> bool:
    return not keywords or any(keyword in text for keyword in keywords)


def _evaluate(text: str, rules: List[Rule]) -> Optional[Tuple[str, int]]:
    for keywords, outcome in rules:
        if not _matches(text, keywords):
            continue
        if isinstance(outcome, list):
            return _evaluate(text, outcome)
        return outcome
    return None


def classify(text: Optional[str]) -> Optional[Condition]:
    """
    Classify a weather description.

    Args:
        text: Free-text description, e.g. "Chance Showers And Thunderstorms"

    Returns:
        Condition, or None for empty or unrecognised text
    """
    logger.debug(f"Parsing weather condition from text: {text}")

    if not text or not isinstance(text, str):
        return None

    result = _evaluate(text.lower(), CONDITION_RULES)
    if result is None:
        return None

    name, code = result
    return Condition(name=name, code=code)


def classify_or_unknown(*texts: Optional[str]) -> Condition:
    """
    Classify the first text that yields a condition.

    Falls back to the Unknown record carrying the first non-empty text, so
    consumers can see what was not understood.
    """
    for text in texts:
        condition = classify(text)
        if condition:
            return condition

    raw = next((t for t in texts if t), None)
    return Condition.unknown(raw)
