"""Flask CLI commands for WealthWise."""

from __future__ import annotations

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """Create any missing tables."""

        from .extensions import get_context
        from .infra.database import create_db_engine, init_database

        engine = create_db_engine(get_context().config)
        init_database(engine)
        engine.dispose()
        click.echo("Database schema is up to date.")

    @app.cli.command("seed-demo")
    def seed_demo_command() -> None:
        """Create the demo user with a month of sample data."""

        from .extensions import get_context
        from .services.demo_seed import DEMO_EMAIL, DEMO_PASSWORD, seed_demo

        user = seed_demo(get_context())
        click.echo(f"Demo user ready (id={user.id}): {DEMO_EMAIL} / {DEMO_PASSWORD}")

    @app.cli.command("run-job")
    @click.argument("name", type=click.Choice(["recurring", "bill-reminders", "cleanup-tokens"]))
    def run_job_command(name: str) -> None:
        """Run one scheduled job immediately."""

        from .extensions import get_context
        from .services.jobs import JOBS

        result = JOBS[name](get_context())
        click.echo(f"{name}: {result}")
