"""
Unlucky - Ripple Grid Tile Engine

A turn-based numeric tile-placement puzzle engine. Every player fills a
4x4 grid with tiles 1..20 so that values strictly increase moving away
from the interior along each row and column. The engine provides:
- Move legality and completion feasibility checks
- Heuristic placement scoring and move ranking
- Draw recommendations for human players
- Automa opponents, a turn loop, CSV snapshots and an HTTP API
"""

__version__ = "0.1.0"
