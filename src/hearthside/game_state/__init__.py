"""
World state management.

Simulation is imported from hearthside.game_state.simulation directly; it
depends on the resolver, which in turn depends on WorldState.
"""

from hearthside.game_state.world_state import ForageNode, Tree, TreeKind, WoodShed, WorldState
from hearthside.game_state.tick_orchestrator import TickOrchestrator, TickReport
from hearthside.game_state.session_manager import SessionManager

__all__ = [
    "ForageNode",
    "Tree",
    "TreeKind",
    "WoodShed",
    "WorldState",
    "TickOrchestrator",
    "TickReport",
    "SessionManager",
]
