"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from tenantaccess import __version__
from tenantaccess.cli import cli
from tenantaccess.core.config import Settings
from tenantaccess.infrastructure.persistence import database


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def file_database(tmp_path, monkeypatch) -> database.DatabaseManager:
    """Point the global database manager at a throwaway SQLite file."""
    manager = database.DatabaseManager(
        Settings(
            _env_file=None,
            environment="testing",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}",
        )
    )
    monkeypatch.setattr(database, "_db_manager", manager)
    return manager


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_info(runner):
    result = runner.invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "TenantAccess" in result.output
    assert "Credential Policy" in result.output


def test_init_db_then_seed_roles(runner, file_database):
    init = runner.invoke(cli, ["init-db", "--force"])
    first = runner.invoke(cli, ["seed-roles", "--company", "acme"])
    second = runner.invoke(cli, ["seed-roles", "--company", "acme"])

    assert init.exit_code == 0, init.output
    assert "Database initialized successfully." in init.output
    assert first.exit_code == 0, first.output
    assert "System role 'Super Admin' (id 1) with 11 permissions" in first.output
    assert "(id 1)" in second.output


def test_init_db_creates_missing_database_directory(runner, tmp_path, monkeypatch):
    """A fresh checkout has no data directory yet."""
    db_file = tmp_path / "ta_data" / "tenantaccess.db"
    manager = database.DatabaseManager(
        Settings(
            _env_file=None,
            environment="testing",
            database_url=f"sqlite+aiosqlite:///{db_file}",
        )
    )
    monkeypatch.setattr(database, "_db_manager", manager)

    result = runner.invoke(cli, ["init-db", "--force"])

    assert result.exit_code == 0, result.output
    assert db_file.exists()


def test_seed_roles_requires_company(runner):
    result = runner.invoke(cli, ["seed-roles"])
    assert result.exit_code == 2
