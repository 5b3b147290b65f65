"""Load Glicko-2 system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, parse_system_section
from domain.ratings.glicko2.calculator import Glicko2Parameters


@dataclass(frozen=True)
class Glicko2SystemConfig(BaseSystemConfig):
    """Configuration for one Glicko-2 rating rebuild."""

    parameters: Glicko2Parameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "initial_rd": self.parameters.initial_rd,
            "initial_volatility": self.parameters.initial_volatility,
            "tau": self.parameters.tau,
            "epsilon": self.parameters.epsilon,
            "max_iterations": self.parameters.max_iterations,
            "lookback_days": self.lookback_days,
        }


def load_glicko2_system_configs(config_dir: Path) -> list[Glicko2SystemConfig]:
    """Load and validate all Glicko-2 TOML config files in a directory."""
    return load_system_configs(config_dir, _parse_config, duplicate_name_label="glicko2")


def _parse_config(raw: dict[str, Any], file_path: Path) -> Glicko2SystemConfig:
    name, description, lookback_days = parse_system_section(raw, file_path)
    glicko2_raw = raw.get("glicko2", {})

    parameters = Glicko2Parameters(
        initial_rating=float(glicko2_raw.get("initial_rating", 1500.0)),
        initial_rd=float(glicko2_raw.get("initial_rd", 350.0)),
        initial_volatility=float(glicko2_raw.get("initial_volatility", 0.06)),
        tau=float(glicko2_raw.get("tau", 0.5)),
        epsilon=float(glicko2_raw.get("epsilon", 1e-6)),
        max_iterations=int(glicko2_raw.get("max_iterations", 1_000)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return Glicko2SystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        lookback_days=lookback_days,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: Glicko2Parameters) -> None:
    if parameters.initial_rating <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].initial_rating must be > 0")
    if parameters.initial_rd <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].initial_rd must be > 0")
    if parameters.initial_volatility <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].initial_volatility must be > 0")
    if parameters.tau <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].tau must be > 0")
    if parameters.epsilon <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].epsilon must be > 0")
    if parameters.max_iterations <= 0:
        raise ValueError(f"{file_path}: [glicko2].max_iterations must be > 0")


__all__ = ["Glicko2SystemConfig", "load_glicko2_system_configs"]
