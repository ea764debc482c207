"""Named-action entry point into the simulation core."""

from hearthside.conversation.action_registry import (
    ActionCategory,
    ActionRegistry,
    ActionSpec,
    create_default_registry,
    execute_action,
)

__all__ = [
    "ActionCategory",
    "ActionRegistry",
    "ActionSpec",
    "create_default_registry",
    "execute_action",
]
