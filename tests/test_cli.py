"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from gcweb.cli.main import app
from tests.fakes import FakeResponse, FakeTransport, log_page, search_record

runner = CliRunner()


@pytest.fixture
def cli_transport(monkeypatch):
    """Route every CLI session through an in-memory transport."""
    transport = FakeTransport()
    monkeypatch.setenv("GCWEB_AUTH_COOKIE", "cookie")
    monkeypatch.setattr("gcweb.api.client.RequestsTransport", lambda config: transport)
    return transport


class TestSearchCommand:
    def test_json_output(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data={"total": 1, "results": [search_record("GC1")]}))

        result = runner.invoke(
            app, ["search", "--box", "52,13,52.5,13.5", "--type", "traditional", "--sort", "name", "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        assert '"geocode": "GC1"' in result.output
        request = cli_transport.requests[0]
        assert request.param("ct") == "2"
        assert request.param("sort") == "geocacheName"
        assert cli_transport.closed

    def test_csv_output(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data={"total": 1, "results": [search_record("GC1")]}))

        result = runner.invoke(app, ["search", "--origin", "52,13", "--format", "csv"])

        assert result.exit_code == 0, result.output
        assert "geocode,name,type" in result.output
        assert "GC1,Cache GC1,traditional" in result.output

    def test_table_output(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data={"total": 1, "results": [search_record("GC1")]}))

        result = runner.invoke(app, ["search", "--keywords", "bridge", "--hide-found"])

        assert result.exit_code == 0, result.output
        assert "GC1" in result.output
        assert cli_transport.requests[0].param("hf") == "1"

    def test_placement_dates(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data={"total": 0, "results": []}))

        result = runner.invoke(
            app, ["search", "--box", "52,13,52.5,13.5", "--placed-after", "2024-01-01", "--placed-before", "2024-02-01"]
        )

        assert result.exit_code == 0, result.output
        assert cli_transport.requests[0].param("psd") == "2024-01-01"
        assert cli_transport.requests[0].param("ped") == "2024-02-01"

    def test_invalid_date(self, cli_transport):
        result = runner.invoke(app, ["search", "--box", "52,13,52.5,13.5", "--placed-after", "not a date at all"])

        assert result.exit_code == 1
        assert cli_transport.call_count == 0

    def test_unknown_type(self, cli_transport):
        result = runner.invoke(app, ["search", "--box", "52,13,52.5,13.5", "--type", "spaceship"])

        assert result.exit_code != 0
        assert cli_transport.call_count == 0

    def test_requires_some_filter(self, cli_transport):
        result = runner.invoke(app, ["search"])

        assert result.exit_code == 1
        assert cli_transport.call_count == 0

    def test_search_failure(self, cli_transport):
        cli_transport.queue(FakeResponse(status_code=401, text="login"))

        result = runner.invoke(app, ["search", "--origin", "52,13"])

        assert result.exit_code == 1
        assert "Search failed" in result.output


class TestAccountCommands:
    def test_inventory(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data=[{"referenceCode": "TB1", "name": "Bug", "trackingNumber": "S1"}]))

        result = runner.invoke(app, ["inventory", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"reference_code": "TB1"' in result.output

    def test_favorite_points(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data=12))

        result = runner.invoke(app, ["favorite-points", "PR1"])

        assert result.exit_code == 0, result.output
        assert "12" in result.output

    def test_dt_matrix(self, cli_transport):
        cli_transport.queue(FakeResponse(json_data=["1-4.5"]))

        result = runner.invoke(app, ["dt-matrix", "--format", "csv"])

        assert result.exit_code == 0, result.output
        assert "difficulty,terrain" in result.output
        assert "1.0,4.5" in result.output


class TestLogCommands:
    def test_post_log(self, cli_transport):
        cli_transport.queue(log_page(), FakeResponse(json_data={"logReferenceCode": "GLABC"}))

        args = ["post-log", "gc1abc", "--type", "found_it", "--text", "TFTC", "--date", "2024-05-01"]
        result = runner.invoke(app, args)

        assert result.exit_code == 0, result.output
        assert "GLABC" in result.output
        assert cli_transport.requests[1].body.json["logType"] == 2

    def test_post_log_blank_text(self, cli_transport):
        result = runner.invoke(app, ["post-log", "GC1ABC", "--text", " "])

        assert result.exit_code == 1
        assert "no_log_text" in result.output
        assert cli_transport.call_count == 0

    def test_trackable_log_aborts_without_token(self, cli_transport):
        cli_transport.queue(log_page(token=None))

        result = runner.invoke(app, ["log-trackable", "TB1", "--action", "discovered_it", "--tracking-code", "S1"])

        assert result.exit_code == 1
        assert "aborted" in result.output
