"""
weapon_api - FastAPI backend for the weapon value evaluator.

Provides RESTful API endpoints for:
- Evaluating a single weapon listing
- Ranking listings by DPS per price
- Rune optimization and base stat reverse-engineering
"""

__version__ = "0.1.0"
