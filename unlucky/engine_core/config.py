"""
Engine Configuration - Tunable constants for rules and heuristics.

The scoring formula, swap hysteresis and recommendation thresholds all
read from one EngineConfig so that personalities and deployments can
adjust them without touching engine code.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
import os
from typing import Mapping

from .grid import BOARD_SIZE


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine-wide configuration.

    Higher alignment_sensitivity = scores fall off faster when a tile's
    magnitude does not match its position.
    """
    # Geometry and supply
    board_size: int = BOARD_SIZE
    tiles_per_cell: int = 5  # max tile = board_size * tiles_per_cell
    sets_per_player: int = 1  # copies of each value per player in the supply

    # Scoring
    alignment_sensitivity: float = 1.0  # alpha

    # Move ranking
    swap_margin: float = 0.10  # swap must beat the occupant by 10%

    # Draw recommendation
    weak_tile_threshold: float = 0.25
    min_recommend_score: float = 0.05
    peek_draw_pile: bool = True

    # Feasibility
    check_inward_supply: bool = False

    @property
    def max_tile(self) -> int:
        return self.board_size * self.tiles_per_cell

    def with_overrides(self, **kwargs) -> EngineConfig:
        """Return a copy with some fields replaced."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(kwargs)
        return EngineConfig(**values)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """
        Build a config from UNLUCKY_* environment variables.

        Example: UNLUCKY_SWAP_MARGIN=0.2 sets swap_margin.
        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = environ.get(f"UNLUCKY_{f.name.upper()}")
            if raw is None:
                continue
            if f.type in ("bool", bool):
                overrides[f.name] = raw.strip().lower() in {"1", "true", "yes", "on"}
            elif f.type in ("int", int):
                overrides[f.name] = int(raw)
            else:
                overrides[f.name] = float(raw)
        return cls(**overrides)


DEFAULT_CONFIG = EngineConfig()
