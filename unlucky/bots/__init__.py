"""
Bots module - Automa AI implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- DrawRecommender: Picks the tile worth taking from the table
- HeuristicBot: Plays the top-ranked move
- Personality: Configurable play styles
"""

from .policy import BotPolicy, BotDecision, DrawDecision, RandomPolicy
from .recommender import DrawRecommender, Recommendation, recommend
from .personality import Personality, PERSONALITIES
from .heuristic_bot import HeuristicBot, create_automa_team

__all__ = [
    "BotPolicy",
    "BotDecision",
    "DrawDecision",
    "RandomPolicy",
    "DrawRecommender",
    "Recommendation",
    "recommend",
    "Personality",
    "PERSONALITIES",
    "HeuristicBot",
    "create_automa_team",
]
