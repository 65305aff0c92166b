from __future__ import annotations

import json

import pytest

from udyamreg.domain.location import UpstreamOutcome
from udyamreg.infrastructure.api_clients import PostalPincodeClient
from udyamreg.presentation.cli.main import create_parser, run_cli


@pytest.fixture
def config_file(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(f"database:\n  url: \"sqlite:///{tmp_path / 'cli.db'}\"\n", encoding="utf-8")
    return str(cfg)


def test_parser_commands():
    parser = create_parser()
    assert parser.parse_args(["lookup", "110001"]).pincode == "110001"
    assert parser.parse_args(["serve", "--port", "9000"]).port == 9000


def test_version(capsys):
    assert run_cli(["--version"]) == 0
    assert "udyamreg" in capsys.readouterr().out


def test_init_db_creates_tables(config_file, tmp_path):
    assert run_cli(["init-db", "--config", config_file]) == 0
    assert (tmp_path / "cli.db").exists()


def test_lookup_rejects_bad_pincode(config_file, capsys):
    assert run_cli(["lookup", "12345", "--config", config_file]) == 2
    assert "Invalid PIN code format" in capsys.readouterr().err


def test_lookup_prints_resolution(config_file, capsys, monkeypatch, delhi_record):
    async def _resolve(self, pincode):
        return UpstreamOutcome.found(delhi_record)

    monkeypatch.setattr(PostalPincodeClient, "resolve", _resolve)

    assert run_cli(["lookup", "110001", "--config", config_file]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["resolution"] == "found"
    assert out["data"]["district"] == "Central Delhi"

    # second lookup is served from the cache
    assert run_cli(["lookup", "110001", "--config", config_file]) == 0
    assert json.loads(capsys.readouterr().out)["source"] == "cache"
