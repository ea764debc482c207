"""
Hearthside - a cabin-in-the-woods survival simulation core.

A tick-driven world (clock, regional weather, a fireplace, wildlife) and a
player (vitals, skills, inventory) acted on through named actions that
resolve to Outcome values.
"""

__version__ = "0.1.0"
