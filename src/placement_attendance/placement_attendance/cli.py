from __future__ import annotations

import logging
from pathlib import Path

import click
from flask import Flask

from .common.datetime_utils import parse_optional_date
from .container import Container
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def register_commands(app: Flask, container: Container, *, db_config: dict, schema_path: Path) -> None:
    """Attach `flask mark-absent` and `flask init-db` to the app."""

    @app.cli.command("mark-absent")
    @click.option("--date", "target", default=None, help="Work date (YYYY-MM-DD); defaults to yesterday.")
    def mark_absent(target):
        try:
            work_date = parse_optional_date(target, "date")
        except ValidationError as e:
            raise click.BadParameter(str(e), param_hint="--date")

        created = container.absence_sweeper.mark_absent_for_date(work_date)
        click.echo(f"Marked {len(created)} students as absent")

    @app.cli.command("init-db")
    def init_db():
        apply_schema(db_config, schema_path=schema_path)
        click.echo(f"Schema applied (tables={len(list_tables(db_config))})")
