"""Tests for the management CLI argument handling."""

import json

import pytest

from routedesk.cli import load_rows, main


@pytest.mark.unit
class TestLoadRows:

    def test_plain_list(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"origin": "PSA"}]))
        assert load_rows(path) == [{"origin": "PSA"}]

    def test_request_body_shape(self, tmp_path):
        path = tmp_path / "body.json"
        path.write_text(json.dumps({"routes": [{"origin": "PSA"}], "overwriteDuplicates": True}))
        assert load_rows(path) == [{"origin": "PSA"}]


@pytest.mark.unit
@pytest.mark.asyncio
class TestMain:

    async def test_unknown_command_prints_usage(self, capsys):
        assert await main(["explode"]) == 2
        assert "Usage:" in capsys.readouterr().out

    async def test_unknown_family_fails(self, capsys):
        assert await main(["dedupe-routes", "agency"]) == 1
        assert "Unknown route family" in capsys.readouterr().out

    async def test_missing_file_fails(self, tmp_path, capsys):
        assert await main(["import-routes", "trucking", str(tmp_path / "none.json")]) == 1
        assert "FAILED" in capsys.readouterr().out
