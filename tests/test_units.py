"""
Tests for unit conversion and validation.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sparkradar.units import (
    SENTINEL_KELVIN, f_to_k, k_to_f, mph_to_ms, inhg_to_hpa, mi_to_km, m_to_km,
    validate_reading, safe_int, safe_float, rounded, epoch_to_iso, epoch_to_date,
)


class TestConversions:
    """Tests for unit conversions."""

    def test_fahrenheit_to_kelvin(self):
        assert f_to_k(32) == pytest.approx(273.15)
        assert f_to_k(212) == pytest.approx(373.15)
        assert f_to_k("86") == pytest.approx(303.15)

    def test_round_trip(self):
        assert k_to_f(f_to_k(72)) == pytest.approx(72)
        assert k_to_f(f_to_k(-40)) == pytest.approx(-40)

    def test_zero_fahrenheit_is_sentinel(self):
        """0 °F converts to exactly the sentinel value."""
        assert f_to_k(0) == SENTINEL_KELVIN
        assert SENTINEL_KELVIN == pytest.approx(255.3722222)

    def test_other_units(self):
        assert mph_to_ms(10) == pytest.approx(4.4704)
        assert inhg_to_hpa(30) == pytest.approx(1015.917)
        assert mi_to_km(10) == pytest.approx(16.0934)
        assert m_to_km(10000) == pytest.approx(10.0)

    def test_absent_input(self):
        """Unparsable input converts to None, not zero."""
        assert f_to_k(None) is None
        assert f_to_k("NA") is None
        assert mph_to_ms("") is None
        assert inhg_to_hpa(None) is None
        assert mi_to_km("calm") is None


class TestValidateReading:
    """Tests for sentinel and NaN rejection."""

    def test_valid_reading(self):
        assert validate_reading(4.5) == 4.5
        assert validate_reading(-3.0) == -3.0

    def test_zero_is_sentinel_by_default(self):
        assert validate_reading(0) is None
        assert validate_reading(0.0) is None

    def test_nan_and_none(self):
        assert validate_reading(float("nan")) is None
        assert validate_reading(float("inf")) is None
        assert validate_reading(None) is None

    def test_kelvin_sentinel(self):
        assert validate_reading(f_to_k(0), sentinel=SENTINEL_KELVIN) is None
        assert validate_reading(f_to_k("0"), sentinel=SENTINEL_KELVIN) is None

    def test_kelvin_sentinel_spellings(self):
        """Both decimal spellings of converted 0 °F are absent."""
        assert validate_reading(255.3722222222222, sentinel=SENTINEL_KELVIN) is None
        assert validate_reading(255.37222222222223, sentinel=SENTINEL_KELVIN) is None
        assert validate_reading(255.37, sentinel=SENTINEL_KELVIN) == 255.37
        # 1 °F is a real reading
        assert validate_reading(f_to_k(1), sentinel=SENTINEL_KELVIN) == pytest.approx(255.9277, abs=1e-3)


class TestSafeParse:
    """Tests for safe integer and float parsing."""

    def test_safe_int(self):
        assert safe_int("45") == 45
        assert safe_int("45.7") == 45
        assert safe_int(12.9) == 12
        assert safe_int(0) == 0
        assert safe_int("0") == 0

    def test_safe_int_absent(self):
        """Failure is None, never 0."""
        assert safe_int("NA") is None
        assert safe_int("") is None
        assert safe_int(None) is None
        assert safe_int(float("nan")) is None
        assert safe_int([1]) is None

    def test_safe_float(self):
        assert safe_float("30.01") == pytest.approx(30.01)
        assert safe_float(0) == 0.0
        assert safe_float("NA") is None
        assert safe_float(None) is None
        assert safe_float(True) is None

    def test_rounded(self):
        assert rounded(1016.255639) == 1016.26
        assert rounded(None) is None


class TestTimeConversions:
    """Tests for epoch conversions."""

    def test_epoch_to_iso(self):
        assert epoch_to_iso(0) == "1970-01-01T00:00:00Z"
        assert epoch_to_iso(1718042400) == "2024-06-10T18:00:00Z"

    def test_epoch_to_date(self):
        assert epoch_to_date(1718064000) == "2024-06-11"
        assert epoch_to_date(1718063999) == "2024-06-10"

    def test_absent_epoch(self):
        assert epoch_to_iso(None) is None
        assert epoch_to_date("soon") is None
