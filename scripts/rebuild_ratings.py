#!/usr/bin/env python3
"""Replay all verified games and write fresh Glicko-2 ratings onto player profiles."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.pipeline import rebuild_profile_ratings
from domain.ratings.glicko2.config import Glicko2SystemConfig, load_glicko2_system_configs
from repositories.schema import ensure_schema

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "glicko2"

app = typer.Typer(
    add_completion=False,
    help="Profile rating rebuild jobs.",
)


def select_config(config_dir: Path, config_name: str) -> Glicko2SystemConfig:
    """Load all configs in a directory and return the one with the given filename."""
    configs = [config for config in load_glicko2_system_configs(config_dir) if config.file_path.name == config_name]
    if not configs:
        raise typer.BadParameter(
            f"No config named '{config_name}' found in {config_dir}",
            param_hint="--config-name",
        )
    return configs[0]


@app.command()
def rebuild(
    db_url: Annotated[
        str,
        typer.Option(
            "--db-url",
            help="Database URL. Defaults to the local pool_ratings postgres instance.",
        ),
    ] = DEFAULT_DB_URL,
    config_dir: Annotated[
        Path,
        typer.Option(
            "--config-dir",
            help="Directory containing Glicko-2 system TOML config files.",
        ),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str,
        typer.Option(
            "--config-name",
            help="Config filename to rebuild with (for example: default.toml).",
        ),
    ] = "default.toml",
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute ratings without writing to profiles."),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG lists skipped games)."),
    ] = "WARNING",
) -> None:
    """Recompute ratings for every player from the full verified history."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = select_config(config_dir, config_name)

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    typer.echo(f"config={config.file_path.name} system={config.name} config_dir={config_dir}")
    summary = rebuild_profile_ratings(
        session_factory=session_factory,
        system_config=config,
        dry_run=dry_run,
        echo=typer.echo,
    )
    for username in summary.missing_profiles:
        typer.echo(f"missing_profile username={username}")


if __name__ == "__main__":
    app()
