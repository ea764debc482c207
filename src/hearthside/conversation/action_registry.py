"""
Action registry and execution helpers.

All player actions are registered here with:
- stable IDs so callers can reference actions deterministically
- parameter schemas for validation
- executors that call the ActionResolver

The registry is the single named-action entry point into the core:
execute(action_name, args, world, dice) -> Outcome. It never advances
time itself; the Outcome's tick_cost and energy_cost are applied by the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from hearthside.data_models import DiceRoller, Direction, Item
from hearthside.game_state.world_state import WorldState
from hearthside.resolution.action_resolver import WAIT_TICKS, ActionResolver
from hearthside.resolution.outcomes import Outcome


class ActionCategory(str, Enum):
    """Categories of actions for organization."""
    MOVEMENT = "movement"
    WOOD_SHED = "wood_shed"
    FIRE = "fire"
    GATHERING = "gathering"
    CRAFTING = "crafting"
    PROVISIONS = "provisions"
    REST = "rest"


ActionExecutor = Callable[[ActionResolver, WorldState, DiceRoller, dict[str, Any]], Outcome]

# Schema types that are converted from free text before the executor runs
PARAM_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "item": Item.from_name,
    "direction": Direction.from_name,
}


@dataclass
class ActionSpec:
    """Schema and executor for a registered action."""
    id: str
    label: str
    category: ActionCategory
    params_schema: dict[str, Any] = field(default_factory=dict)
    executor: Optional[ActionExecutor] = None
    help: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "category": self.category.value,
            "params_schema": self.params_schema,
            "help": self.help,
        }


class ActionRegistry:
    """
    Central registry for all player actions.

    Provides:
    - Action lookup by ID
    - Parameter validation and conversion
    - Execution routing to the resolver
    """

    def __init__(self, resolver: ActionResolver) -> None:
        self.resolver = resolver
        self._actions: dict[str, ActionSpec] = {}
        self._by_category: dict[ActionCategory, list[ActionSpec]] = {}

    def register(self, spec: ActionSpec) -> None:
        """Register an action."""
        if spec.id in self._actions:
            raise ValueError(f"Action already registered: {spec.id}")
        self._actions[spec.id] = spec

        if spec.category not in self._by_category:
            self._by_category[spec.category] = []
        self._by_category[spec.category].append(spec)

    def get(self, action_id: str) -> Optional[ActionSpec]:
        """Get an action by ID."""
        return self._actions.get(action_id)

    def all(self) -> list[ActionSpec]:
        """Get all registered actions."""
        return list(self._actions.values())

    def by_category(self, category: ActionCategory) -> list[ActionSpec]:
        """Get actions by category."""
        return self._by_category.get(category, [])

    def validate_params(self, action_id: str, params: dict[str, Any]) -> list[str]:
        """
        Validate parameters against action schema.

        Returns list of validation errors (empty if valid).
        """
        spec = self.get(action_id)
        if not spec:
            return [f"Unknown action: {action_id}"]

        errors = []
        schema = spec.params_schema

        for param_name, param_def in schema.items():
            if param_def.get("required", False) and param_name not in params:
                errors.append(f"Missing required parameter: {param_name}")

            if param_name in params and "type" in param_def:
                value = params[param_name]
                expected_type = param_def["type"]
                if expected_type in ("string", "item", "direction") and not isinstance(value, (str, Item, Direction)):
                    errors.append(f"Parameter {param_name} must be a string")
                elif "choices" in param_def and str(value).strip().lower() not in param_def["choices"]:
                    choices = ", ".join(param_def["choices"])
                    errors.append(f"Parameter {param_name} must be one of: {choices}")

        for param_name in params:
            if param_name not in schema:
                errors.append(f"Unexpected parameter: {param_name}")

        return errors

    def convert_params(self, action_id: str, params: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
        """
        Convert free-text item and direction names to their enums.

        Returns:
            (converted params, list of conversion errors)
        """
        spec = self.get(action_id)
        if not spec:
            return {}, [f"Unknown action: {action_id}"]

        converted: dict[str, Any] = {}
        errors = []
        for name, value in params.items():
            param_type = spec.params_schema.get(name, {}).get("type")
            converter = PARAM_CONVERTERS.get(param_type)
            if converter is None or not isinstance(value, str):
                converted[name] = value
                continue
            result = converter(value)
            if result is None:
                errors.append(f"Unknown {param_type}: '{value}'")
            else:
                converted[name] = result
        return converted, errors

    def execute(
        self,
        action_id: str,
        params: Optional[dict[str, Any]],
        world: WorldState,
        dice: DiceRoller,
    ) -> Outcome:
        """
        Execute an action by ID.

        Unknown actions and invalid parameters are reported as a Failure
        outcome; nothing in the world is touched in that case.
        """
        spec = self.get(action_id)
        if not spec:
            return Outcome.failure(f"Unknown action: {action_id}")

        params = params or {}
        errors = self.validate_params(action_id, params)
        if errors:
            return Outcome.failure(f"Validation failed: {'; '.join(errors)}", errors=errors)

        converted, errors = self.convert_params(action_id, params)
        if errors:
            return Outcome.failure(f"Validation failed: {'; '.join(errors)}", errors=errors)

        if spec.executor is None:
            return Outcome.failure(f"No executor for action: {action_id}")
        return spec.executor(self.resolver, world, dice, converted)


# =============================================================================
# DEFAULT REGISTRY WITH ALL ACTIONS
# =============================================================================


def _no_params(method_name: str) -> ActionExecutor:
    def _execute(resolver: ActionResolver, world: WorldState, dice: DiceRoller, p: dict[str, Any]) -> Outcome:
        return getattr(resolver, method_name)(world, dice)
    return _execute


def _one_param(method_name: str, param: str) -> ActionExecutor:
    def _execute(resolver: ActionResolver, world: WorldState, dice: DiceRoller, p: dict[str, Any]) -> Outcome:
        return getattr(resolver, method_name)(world, dice, p[param])
    return _execute


ITEM_PARAM = {"item": {"type": "item", "required": True}}


def create_default_registry(resolver: ActionResolver) -> ActionRegistry:
    """Create a registry with every standard action bound to resolver."""
    registry = ActionRegistry(resolver)

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="move",
        label="Walk one step",
        category=ActionCategory.MOVEMENT,
        params_schema={"direction": {"type": "direction", "required": True}},
        help="Step north, south, east or west; indoors, move between rooms.",
        executor=_one_param("move", "direction"),
    ))
    registry.register(ActionSpec(
        id="enter",
        label="Enter a building",
        category=ActionCategory.MOVEMENT,
        params_schema={"place": {"type": "string", "required": True}},
        help="Enter the cabin or the wood shed when standing next to it.",
        executor=_one_param("enter", "place"),
    ))
    registry.register(ActionSpec(
        id="exit",
        label="Step outside",
        category=ActionCategory.MOVEMENT,
        executor=_no_params("exit"),
    ))

    # -------------------------------------------------------------------------
    # Wood shed
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="gather",
        label="Pick something up",
        category=ActionCategory.WOOD_SHED,
        params_schema=ITEM_PARAM,
        help="Take a log, the axe or firewood in the shed, or a stone outdoors.",
        executor=_one_param("gather", "item"),
    ))
    registry.register(ActionSpec(
        id="place_log",
        label="Put a log on the chopping block",
        category=ActionCategory.WOOD_SHED,
        executor=_no_params("place_log"),
    ))
    registry.register(ActionSpec(
        id="chop_log",
        label="Chop the log on the block",
        category=ActionCategory.WOOD_SHED,
        help="Woodcutting check; success yields firewood, failure a nick from the axe.",
        executor=_no_params("chop_log"),
    ))
    registry.register(ActionSpec(
        id="split_firewood",
        label="Split firewood into kindling",
        category=ActionCategory.WOOD_SHED,
        executor=_no_params("split_firewood"),
    ))

    # -------------------------------------------------------------------------
    # Fire
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="add_fuel",
        label="Feed the fireplace",
        category=ActionCategory.FIRE,
        params_schema=ITEM_PARAM,
        executor=_one_param("add_fuel", "item"),
    ))
    registry.register(ActionSpec(
        id="light_fire",
        label="Light the fireplace",
        category=ActionCategory.FIRE,
        help="Fire-making check with the matchbox; carried kindling helps but burns on failure.",
        executor=_no_params("light_fire"),
    ))

    # -------------------------------------------------------------------------
    # Gathering
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="forage",
        label="Forage the surroundings",
        category=ActionCategory.GATHERING,
        executor=_no_params("forage"),
    ))
    registry.register(ActionSpec(
        id="knap_stone",
        label="Knap a sharp stone",
        category=ActionCategory.GATHERING,
        executor=_no_params("knap_stone"),
    ))
    registry.register(ActionSpec(
        id="fetch_water",
        label="Fill the kettle at the lake",
        category=ActionCategory.GATHERING,
        executor=_no_params("fetch_water"),
    ))
    registry.register(ActionSpec(
        id="chop_tree",
        label="Chop the tree here",
        category=ActionCategory.GATHERING,
        help="Woodcutting check with an axe; enough good strokes fell the tree for logs and kindling.",
        executor=_no_params("chop_tree"),
    ))
    registry.register(ActionSpec(
        id="fish",
        label="Fish from the shore",
        category=ActionCategory.GATHERING,
        params_schema={"gear": {"type": "string", "required": False}},
        help="Cast by the lake or oasis; a rod improves the catch.",
        executor=lambda resolver, world, dice, p: resolver.fish(world, dice, p.get("gear", "")),
    ))

    # -------------------------------------------------------------------------
    # Crafting
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="start_project",
        label="Start a crafting project",
        category=ActionCategory.CRAFTING,
        params_schema={"target": {"type": "item", "required": True}},
        executor=_one_param("start_project", "target"),
    ))
    registry.register(ActionSpec(
        id="add_material",
        label="Add a material to the project",
        category=ActionCategory.CRAFTING,
        params_schema=ITEM_PARAM,
        executor=_one_param("add_material", "item"),
    ))
    registry.register(ActionSpec(
        id="abandon_project",
        label="Abandon the current project",
        category=ActionCategory.CRAFTING,
        executor=_no_params("abandon_project"),
    ))

    # -------------------------------------------------------------------------
    # Provisions
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="boil_water",
        label="Boil water over the fire",
        category=ActionCategory.PROVISIONS,
        executor=_no_params("boil_water"),
    ))
    registry.register(ActionSpec(
        id="brew_tea",
        label="Brew herbal tea",
        category=ActionCategory.PROVISIONS,
        executor=_no_params("brew_tea"),
    ))
    registry.register(ActionSpec(
        id="cook_fish",
        label="Grill a fish over the fire",
        category=ActionCategory.PROVISIONS,
        params_schema={"item": {"type": "item", "required": False}},
        executor=lambda resolver, world, dice, p: resolver.cook_fish(world, dice, p.get("item", Item.SMALL_FISH)),
    ))
    registry.register(ActionSpec(
        id="consume",
        label="Eat or drink",
        category=ActionCategory.PROVISIONS,
        params_schema=ITEM_PARAM,
        executor=_one_param("consume", "item"),
    ))

    # -------------------------------------------------------------------------
    # Rest
    # -------------------------------------------------------------------------
    registry.register(ActionSpec(
        id="sleep",
        label="Sleep",
        category=ActionCategory.REST,
        executor=_no_params("sleep"),
    ))
    registry.register(ActionSpec(
        id="wait",
        label="Wait a while",
        category=ActionCategory.REST,
        params_schema={"duration": {"type": "string", "required": False, "choices": sorted(WAIT_TICKS)}},
        executor=lambda resolver, world, dice, p: resolver.wait(world, dice, p.get("duration", "short")),
    ))

    return registry


def execute_action(
    registry: ActionRegistry,
    action_id: str,
    params: Optional[dict[str, Any]],
    world: WorldState,
    dice: DiceRoller,
) -> Outcome:
    """Execute a named action through a registry."""
    return registry.execute(action_id, params, world, dice)
