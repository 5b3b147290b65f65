"""Full-history rating rebuild: fetch verified games, replay, write profiles."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from domain.ratings.glicko2.config import Glicko2SystemConfig
from domain.ratings.replay import replay_games
from repositories.games import fetch_verified_games
from repositories.profiles import apply_profile_ratings


@dataclass(frozen=True)
class RebuildSummary:
    """Outcome for one rebuilt system config."""

    system_name: str
    config_file: str
    processed_games: int
    skipped_games: int
    rated_players: int
    updated_profiles: int
    missing_profiles: tuple[str, ...]
    dry_run: bool


def rebuild_profile_ratings(
    *,
    session_factory: sessionmaker[Session],
    system_config: Glicko2SystemConfig,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> RebuildSummary:
    """Recompute every player's rating from scratch and store it on their profile."""
    lookback_days = None if system_config.lookback_days == 0 else system_config.lookback_days

    with session_factory() as session:
        games = fetch_verified_games(session, lookback_days)
        result = replay_games(games, system_config.parameters)
        rated_players = len(result.ratings)

        if dry_run:
            if echo is not None:
                echo(
                    f"[dry-run] config={system_config.file_path.name} "
                    f"system={system_config.name} "
                    f"fetched_games={len(games)} "
                    f"processed_games={result.processed_games} "
                    f"skipped_games={result.skipped_games} "
                    f"rated_players={rated_players} "
                    f"params={json.dumps(system_config.as_config_json(), sort_keys=True)}"
                )
            session.rollback()
            return RebuildSummary(
                system_name=system_config.name,
                config_file=system_config.file_path.name,
                processed_games=result.processed_games,
                skipped_games=result.skipped_games,
                rated_players=rated_players,
                updated_profiles=0,
                missing_profiles=(),
                dry_run=True,
            )

        try:
            missing = apply_profile_ratings(session, result.ratings)
            session.commit()
        except Exception:
            session.rollback()
            raise

        updated_profiles = rated_players - len(missing)
        if echo is not None:
            echo(
                "completed "
                f"config={system_config.file_path.name} "
                f"system={system_config.name} "
                f"processed_games={result.processed_games} "
                f"skipped_games={result.skipped_games} "
                f"rated_players={rated_players} "
                f"updated_profiles={updated_profiles} "
                f"missing_profiles={len(missing)}"
            )

        return RebuildSummary(
            system_name=system_config.name,
            config_file=system_config.file_path.name,
            processed_games=result.processed_games,
            skipped_games=result.skipped_games,
            rated_players=rated_players,
            updated_profiles=updated_profiles,
            missing_profiles=tuple(missing),
            dry_run=False,
        )


__all__ = ["RebuildSummary", "rebuild_profile_ratings"]
