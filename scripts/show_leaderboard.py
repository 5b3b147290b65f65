#!/usr/bin/env python3
"""Show the rating leaderboard and current win streaks, replayed from verified games."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.ratings.glicko2.config import load_glicko2_system_configs
from domain.ratings.leaderboard import average_balls_won, build_leaderboard, streak_leaders
from domain.ratings.replay import compute_final_ratings
from repositories.games import fetch_verified_games
from repositories.profiles import fetch_usernames

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "glicko2"

app = typer.Typer(
    add_completion=False,
    help="Query the current leaderboard.",
)


@app.command()
def show_leaderboard(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to return."),
    ] = 20,
    min_streak: Annotated[
        int,
        typer.Option("--min-streak", help="Minimum win streak listed under streak leaders."),
    ] = 3,
    profiles_only: Annotated[
        bool,
        typer.Option(
            "--profiles-only/--all-players",
            help="Only list players that have a profile row.",
        ),
    ] = True,
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
        typer.Option("--config-name", help="Config filename supplying Glicko-2 parameters."),
    ] = "default.toml",
) -> None:
    """Replay verified games and print the top players by rating."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    if min_streak <= 0:
        raise typer.BadParameter("--min-streak must be greater than 0")

    configs = [config for config in load_glicko2_system_configs(config_dir) if config.file_path.name == config_name]
    if not configs:
        raise typer.BadParameter(
            f"No config named '{config_name}' found in {config_dir}",
            param_hint="--config-name",
        )
    config = configs[0]

    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        lookback = None if config.lookback_days == 0 else config.lookback_days
        games = fetch_verified_games(session, lookback)
        usernames = fetch_usernames(session) if profiles_only else None

    ratings = compute_final_ratings(games, config.parameters)
    entries = build_leaderboard(ratings, usernames)[:top_n]

    typer.echo(f"system={config.name} games={len(games)} players={len(entries)}")
    if not entries:
        typer.echo("no rated players")
        return

    for rank, entry in enumerate(entries, start=1):
        avg_balls = average_balls_won(games, entry.player)
        avg_won_by = "-" if avg_balls is None else f"{avg_balls:.1f}"
        typer.echo(
            f"{rank:>3}. {entry.player:<24} rating={entry.rating:>5} rd={entry.rd:>4} "
            f"record={entry.wins}-{entry.losses} win_rate={entry.win_rate}% streak={entry.streak:+d} "
            f"avg_won_by={avg_won_by}"
        )

    leaders = streak_leaders(ratings, min_streak=min_streak, usernames=usernames)
    if leaders:
        typer.echo("streak leaders:")
        for player, streak in leaders:
            typer.echo(f"  {player} streak={streak}")


if __name__ == "__main__":
    app()
