"""Command-line interface for TenantAccess.

This module provides the CLI commands for running and managing
the TenantAccess application.
"""

import asyncio
from typing import NoReturn

import click

from tenantaccess import __version__
from tenantaccess.core.config import get_settings
from tenantaccess.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="TenantAccess")
def cli() -> None:
    """TenantAccess - company user accounts and role-based access control.

    Settings are read from TENANTACCESS_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Auto-reload on code changes. Defaults to on in development.",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Start the TenantAccess server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers
    if reload is None:
        reload = settings.is_development

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting TenantAccess server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "tenantaccess.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create the database tables.

    Use this only in development. In production, run the Alembic migrations.
    """
    from tenantaccess.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm("This will create all database tables. Continue?", abort=True, default=False)

    async def initialize():
        from tenantaccess.infrastructure.persistence import models  # noqa: F401

        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--company", "company_id", required=True, help="Company to seed")
def seed_roles(company_id: str) -> None:
    """Create the system role for a company if it is missing."""
    from tenantaccess.domain.exceptions import DirectoryError
    from tenantaccess.domain.services import RoleRegistry
    from tenantaccess.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    async def seed():
        db = get_db_manager()
        try:
            async with db.session() as session:
                roles = await RoleRegistry(session, settings=settings).seed_system_roles(
                    company_id
                )
            for role in roles:
                click.echo(
                    f"System role '{role.name}' (id {role.id}) "
                    f"with {len(role.permissions)} permissions"
                )
            logger.info("System roles seeded via CLI", company_id=company_id)
        except DirectoryError as e:
            click.echo(f"Error: {e.message}", err=True)
            logger.error("Seeding system roles failed", company_id=company_id, error=str(e))
            raise SystemExit(1)
        finally:
            await db.disconnect()

    asyncio.run(seed())


@cli.command()
def info() -> None:
    """Display TenantAccess configuration."""
    settings = get_settings()

    click.echo(f"""
TenantAccess v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Credential Policy:
  Expiry:       {settings.password_expiry_days} days
  Warning:      {settings.password_expiry_warning_days} days
  Min Length:   {settings.password_min_length}

Catalogs:
  Departments:  {', '.join(settings.departments)}
  Permissions:  {len(settings.permissions)} tags
  System Role:  {settings.system_role_name}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `tenantaccess` command and by `python -m tenantaccess`.
    """
    cli()


if __name__ == "__main__":
    main()
