"""
Tests for the upstream fetchers and the orchestrator.
"""

import os
import pytest
import requests
from unittest.mock import Mock, patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sparkradar import fetch_spc
from sparkradar.fetch_nws import (
    DEFAULT_USER_AGENT, MAPCLICK_URL, fetch_mapclick, fetch_zone_alerts, get_session,
)
from sparkradar.fetch_owm import ONECALL_URL, fetch_onecall, get_api_key
from sparkradar.fetch_spc import (
    DEFAULT_MCD_URL, fetch_mesoscale_discussions, fetch_spc_outlooks,
)
from sparkradar.merge import parse_weather_data
from sparkradar.run import (
    STATUS_FETCH_ERROR, STATUS_NO_DATA, STATUS_NOT_FETCHED, STATUS_OK, fetch_all, onecall,
)


def json_response(payload):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def session_returning(*responses):
    session = Mock()
    session.get.side_effect = list(responses)
    return session


def failing_session(error):
    session = Mock()
    session.get.side_effect = error
    return session


class TestGetSession:

    def test_default_user_agent(self):
        with patch.dict(os.environ, {}, clear=True):
            session = get_session()

        assert session.headers["User-Agent"] == DEFAULT_USER_AGENT
        assert session.headers["Accept"] == "*/*"

    def test_user_agent_from_environment(self):
        with patch.dict(os.environ, {"SPARKRADAR_USER_AGENT": "(example.com, ops@example.com)"}):
            session = get_session(accept="application/geo+json")

        assert session.headers["User-Agent"] == "(example.com, ops@example.com)"
        assert session.headers["Accept"] == "application/geo+json"


class TestFetchMapClick:
    """Tests for the NWS point document fetch."""

    def test_success(self):
        session = session_returning(json_response({"location": {"wfo": "JAN"}}))

        data = fetch_mapclick(32.3, -90.18, session=session)

        assert data == {"location": {"wfo": "JAN"}}
        args, kwargs = session.get.call_args
        assert args[0] == MAPCLICK_URL
        assert kwargs["params"] == {"lat": 32.3, "lon": -90.18, "FcstType": "json"}

    def test_html_page_means_no_data(self):
        response = json_response(None)
        response.json.side_effect = ValueError("Expecting value")

        assert fetch_mapclick(51.5, -0.12, session=session_returning(response)) == {}

    def test_request_failure(self):
        session = failing_session(requests.exceptions.ConnectionError("unreachable"))

        assert fetch_mapclick(32.3, -90.18, session=session) is None


class TestFetchZoneAlerts:

    def test_zone_url(self):
        session = session_returning(json_response({"features": [{}, {}]}))

        data = fetch_zone_alerts("MSZ047", session=session)

        assert len(data["features"]) == 2
        assert session.get.call_args[0][0] == "https://api.weather.gov/alerts/active/zone/MSZ047"

    def test_http_error(self):
        response = json_response({})
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")

        assert fetch_zone_alerts("MSZ047", session=session_returning(response)) is None


class TestFetchOneCall:
    """Tests for the OpenWeatherMap fetch."""

    def test_missing_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError):
                get_api_key()

    def test_key_sent_as_appid(self):
        session = session_returning(json_response({"current": {}}))

        with patch.dict(os.environ, {"OWM_API_KEY": "secret"}):
            data = fetch_onecall(32.3, -90.18, session=session)

        assert data == {"current": {}}
        args, kwargs = session.get.call_args
        assert args[0] == ONECALL_URL
        assert kwargs["params"]["appid"] == "secret"

    def test_error_does_not_log_key(self, caplog):
        error = requests.exceptions.HTTPError("401 for url: ...appid=secret")

        data = fetch_onecall(32.3, -90.18, api_key="secret", session=failing_session(error))

        assert data is None
        assert "secret" not in caplog.text
        assert "HTTPError" in caplog.text


class TestFetchSPC:
    """Tests for SPC outlook and MCD fetches."""

    def test_three_days_in_order(self):
        session = session_returning(
            json_response({"features": [{"id": 1}]}),
            json_response({"features": []}),
            json_response({"features": [{"id": 3}]}),
        )

        with patch.object(fetch_spc.time, "sleep"):
            outlooks = fetch_spc_outlooks(session=session)

        assert [len(o["features"]) for o in outlooks] == [1, 0, 1]
        urls = [call[0][0] for call in session.get.call_args_list]
        assert urls == [
            "https://www.spc.noaa.gov/products/outlook/day1otlk_cat.nolyr.geojson",
            "https://www.spc.noaa.gov/products/outlook/day2otlk_cat.nolyr.geojson",
            "https://www.spc.noaa.gov/products/outlook/day3otlk_cat.nolyr.geojson",
        ]

    def test_failed_day_keeps_alignment(self):
        session = session_returning(
            json_response({"features": [{"id": 1}]}),
            requests.exceptions.Timeout("slow"),
            json_response({"features": [{"id": 3}]}),
        )

        with patch.object(fetch_spc.time, "sleep"):
            outlooks = fetch_spc_outlooks(session=session)

        assert len(outlooks) == 3
        assert outlooks[1] == {"type": "FeatureCollection", "features": []}
        assert outlooks[2]["features"] == [{"id": 3}]

    def test_mcd_query(self):
        session = session_returning(json_response({"type": "FeatureCollection", "features": []}))

        with patch.dict(os.environ, {}, clear=True):
            data = fetch_mesoscale_discussions(session=session)

        assert data["features"] == []
        args, kwargs = session.get.call_args
        assert args[0] == DEFAULT_MCD_URL
        assert kwargs["params"]["f"] == "geojson"

    def test_mcd_url_override(self):
        session = session_returning(json_response({"features": []}))

        with patch.dict(os.environ, {"SPC_MCD_URL": "https://mirror.example.com/mcd"}):
            fetch_mesoscale_discussions(session=session)

        assert session.get.call_args[0][0] == "https://mirror.example.com/mcd"

    def test_mcd_service_error(self):
        session = session_returning(json_response({"error": {"code": 400, "message": "Invalid query"}}))

        assert fetch_mesoscale_discussions(session=session) is None


MAPCLICK = {"location": {"wfo": "JAN", "radar": "KDGX", "zone": "MSZ047"}}


class TestFetchAll:
    """Tests for source statuses in the orchestrator."""

    def run(self, owm, nws, alerts=None):
        with patch("sparkradar.run.fetch_onecall", return_value=owm), \
                patch("sparkradar.run.fetch_mapclick", return_value=nws), \
                patch("sparkradar.run.fetch_zone_alerts", return_value=alerts) as zone_alerts, \
                patch("sparkradar.run.fetch_spc_outlooks", return_value=[]), \
                patch("sparkradar.run.fetch_mesoscale_discussions", return_value=None):
            return fetch_all(32.3, -90.18), zone_alerts

    def test_all_sources_ok(self):
        fetched, zone_alerts = self.run({"current": {}}, MAPCLICK, {"features": []})

        assert fetched["status"] == {"owm": STATUS_OK, "nws": STATUS_OK, "alerts": STATUS_OK}
        zone_alerts.assert_called_once_with("MSZ047")

    def test_outside_nws_coverage(self):
        fetched, zone_alerts = self.run({"current": {}}, {})

        assert fetched["status"]["nws"] == STATUS_NO_DATA
        assert fetched["status"]["alerts"] == STATUS_NOT_FETCHED
        zone_alerts.assert_not_called()

    def test_fetch_errors(self):
        fetched, _ = self.run(None, None)

        assert fetched["status"]["owm"] == STATUS_FETCH_ERROR
        assert fetched["status"]["nws"] == STATUS_FETCH_ERROR
        assert fetched["status"]["alerts"] == STATUS_NOT_FETCHED

    def test_alert_fetch_error(self):
        fetched, _ = self.run({"current": {}}, MAPCLICK, None)

        assert fetched["status"]["alerts"] == STATUS_FETCH_ERROR


class TestOneCall:

    def test_point_is_lon_lat(self):
        fetched = {
            "status": {"owm": STATUS_OK, "nws": STATUS_OK, "alerts": STATUS_OK},
            "owm": None, "nws": MAPCLICK, "alerts": None, "spc": [], "mcd": None,
        }

        with patch("sparkradar.run.fetch_all", return_value=fetched), \
                patch("sparkradar.run.parse_weather_data", wraps=parse_weather_data) as merge:
            response = onecall(32.3, -90.18)

        assert merge.call_args.kwargs["point"] == (-90.18, 32.3)
        assert response["status"]["nws"] == STATUS_OK
        assert response["data"]["location"]["wfo"] == "JAN"
