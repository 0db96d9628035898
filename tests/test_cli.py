"""
Tests for the command line entry points
"""

from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from bookshelf import __version__
from bookshelf.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.unit
def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.unit
def test_serve_runs_app_in_process(runner):
    with patch("bookshelf.cli.uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "4100"])

    assert result.exit_code == 0, result.output
    _, kwargs = mock_run.call_args
    assert kwargs["port"] == 4100
    assert kwargs["host"] == "0.0.0.0"


@pytest.mark.unit
def test_serve_with_reload_uses_import_string(runner):
    with patch("bookshelf.cli.uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--reload"])

    assert result.exit_code == 0, result.output
    args, kwargs = mock_run.call_args
    assert args[0] == "bookshelf.api.app:app"
    assert kwargs["reload"] is True
    assert kwargs["workers"] == 1


@pytest.mark.unit
def test_seed_reports_counts(runner):
    async def fake_seed(db):
        return 5, 7

    with (
        patch("bookshelf.database.seed_data.seed_sample_catalog", fake_seed),
        patch("bookshelf.database.connection.get_async_session") as mock_session,
        patch("bookshelf.database.connection.dispose_database") as mock_dispose,
    ):
        mock_session.return_value.__aenter__.return_value = object()
        mock_dispose.return_value = None
        result = runner.invoke(cli, ["seed"])

    assert result.exit_code == 0, result.output
    assert "5 authors, 7 books added" in result.output


@pytest.mark.unit
class TestAlembicConfig:
    def test_missing_ini_is_reported(self, tmp_path):
        from bookshelf.database.cli import get_alembic_config

        with pytest.raises(click.ClickException, match="alembic.ini not found"):
            get_alembic_config(tmp_path)

    def test_script_location_is_absolute(self, tmp_path):
        from bookshelf.database.cli import get_alembic_config

        (tmp_path / "alembic.ini").write_text("[alembic]\nscript_location = alembic\n")

        config = get_alembic_config(tmp_path)

        assert config.get_main_option("script_location") == str(tmp_path / "alembic")

    def test_upgrade_defaults_to_head(self, runner):
        from bookshelf.database.cli import main

        with patch("bookshelf.database.cli.command.upgrade") as mock_upgrade:
            result = runner.invoke(main, ["upgrade"])

        assert result.exit_code == 0, result.output
        assert mock_upgrade.call_args.args[1] == "head"

    def test_failed_upgrade_exits_non_zero(self, runner):
        from bookshelf.database.cli import main

        with patch("bookshelf.database.cli.command.upgrade", side_effect=RuntimeError("boom")):
            result = runner.invoke(main, ["upgrade"])

        assert result.exit_code == 1
