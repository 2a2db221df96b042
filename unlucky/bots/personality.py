"""
Bot Personalities - Configurable play styles.

Personalities adjust:
- Engine configuration (scoring sensitivity, swap appetite, thresholds)
- Randomness (for unpredictability)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random
from typing import Any

from ..engine_core.config import EngineConfig


@dataclass
class Personality:
    """
    A bot personality that defines play style.

    The config is merged over the game's own config by the bot, so only
    heuristic fields are meant to differ between personalities.
    """
    name: str
    description: str = ""

    config: EngineConfig = field(default_factory=EngineConfig)

    randomness: float = 0.0  # Probability of a random move

    metadata: dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Predefined Personalities
# ============================================================================

BALANCED = Personality(
    name="Balanced",
    description="Default heuristic, swaps only for clear gains",
)


CAUTIOUS = Personality(
    name="Cautious",
    description="Insists on tiles that fit their position, rarely swaps",
    config=EngineConfig(
        alignment_sensitivity=1.6,
        swap_margin=0.25,
        min_recommend_score=0.15,
        check_inward_supply=True,
    ),
)


GREEDY = Personality(
    name="Greedy",
    description="Grabs table tiles eagerly and swaps freely",
    config=EngineConfig(
        alignment_sensitivity=0.7,
        swap_margin=0.05,
        weak_tile_threshold=0.4,
        min_recommend_score=0.02,
    ),
)


CHAOTIC = Personality(
    name="Chaotic",
    description="Unpredictable play with high randomness",
    randomness=0.3,
)


# All predefined personalities
PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "cautious": CAUTIOUS,
    "greedy": GREEDY,
    "chaotic": CHAOTIC,
}


def create_random_personality(
    name: str = "Random",
    base: Personality | None = None,
    variance: float = 0.3,
    seed: int | None = None,
) -> Personality:
    """
    Create a personality with random variations.

    Args:
        name: Name for the personality
        base: Base personality to vary from (default: BALANCED)
        variance: How much to vary (0-1)
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    base = base or BALANCED

    def vary(value: float) -> float:
        delta = value * variance * (rng.random() * 2 - 1)
        return max(0.0, value + delta)

    config = base.config.with_overrides(
        alignment_sensitivity=max(0.1, vary(base.config.alignment_sensitivity)),
        swap_margin=vary(base.config.swap_margin),
        weak_tile_threshold=min(1.0, vary(base.config.weak_tile_threshold)),
        min_recommend_score=min(1.0, vary(base.config.min_recommend_score)),
    )

    return Personality(
        name=name,
        description=f"Randomly varied from {base.name}",
        config=config,
        randomness=max(0.0, min(1.0, base.randomness + variance * 0.5 * (rng.random() * 2 - 1))),
        metadata={"base": base.name, "variance": variance, "seed": seed},
    )
