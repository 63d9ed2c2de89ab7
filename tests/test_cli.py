"""Tests for the pkgdash command line."""

import json

import pytest
from typer.testing import CliRunner

from pkgdash.cli import app
from pkgdash.core import database
from pkgdash.domain import repos

runner = CliRunner()


@pytest.fixture
def snapshot(tmp_path, sample_records):
    path = tmp_path / "summary.json"
    path.write_text(json.dumps(sample_records))
    return path


def stored_names():
    session = database.get_session_local()()
    try:
        page = repos.PackageRepo(session).list(regex=None, page=1, limit=100)
        return [p.package_name for p in page.items]
    finally:
        session.close()


class TestImportCommand:
    """Tests for `pkgdash import`."""

    def test_imports_snapshot(self, db, snapshot):
        result = runner.invoke(app, ["import", str(snapshot)])

        assert result.exit_code == 0, result.output
        assert "Import summary" in result.output
        assert stored_names() == ["curl", "openssl", "zlib"]

    def test_default_path_from_settings(self, db, snapshot, monkeypatch):
        from pkgdash.core import config

        monkeypatch.setenv("SNAPSHOT_PATH", str(snapshot))
        config.reset_settings()

        result = runner.invoke(app, ["import"])

        assert result.exit_code == 0, result.output
        assert len(stored_names()) == 3

    def test_reimport_replaces(self, db, snapshot, tmp_path):
        runner.invoke(app, ["import", str(snapshot)])
        smaller = tmp_path / "smaller.json"
        smaller.write_text(json.dumps([{"packageName": "only-one"}]))

        result = runner.invoke(app, ["import", str(smaller)])

        assert result.exit_code == 0, result.output
        assert stored_names() == ["only-one"]

    def test_missing_file(self, db, tmp_path):
        result = runner.invoke(app, ["import", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Import failed" in result.output

    def test_bad_record_leaves_data_untouched(self, db, snapshot, tmp_path):
        runner.invoke(app, ["import", str(snapshot)])
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps([{"packageName": "x", "successTime": "yesterday-ish"}]))

        result = runner.invoke(app, ["import", str(bad)])

        assert result.exit_code == 1
        assert len(stored_names()) == 3


class TestShowCommand:
    """Tests for `pkgdash show`."""

    def test_show(self, db, snapshot):
        runner.invoke(app, ["import", str(snapshot)])

        result = runner.invoke(app, ["show", "openssl"])

        assert result.exit_code == 0, result.output
        assert "base image bumped" in result.output
        assert "BI flaky on arm64" in result.output
        assert result.output.index("base image bumped") < result.output.index("BI flaky on arm64")

    def test_unknown_package(self, db):
        result = runner.invoke(app, ["show", "nope"])

        assert result.exit_code == 1
        assert "No package named nope" in result.output


def test_lambda_handler_wraps_app():
    from pkgdash import lambda_handler
    from pkgdash.main import app as api

    assert lambda_handler.handler.app is api
    assert callable(lambda_handler.lambda_handler)
