"""
Action resolver for the Hearthside simulation core.

Every player action follows one pattern:
1. Validate location, tool and material preconditions. The first violated
   precondition becomes a Failure and nothing is mutated.
2. For skill-gated actions, roll a skill check:
   chance = (base + skill_level / 2 + bonus) / 100, optionally capped.
3. On success apply the reward (quantities drawn from fixed inclusive
   ranges) and roll a flat 30% chance to award one skill XP.
4. On failure apply the designed cost and report PartialSuccess when
   something was still used up, Failure otherwise.

The resolver never advances time or deducts the action's energy cost
itself: it reports tick_cost and energy_cost on the Outcome and the caller
applies them. Randomness comes only from the DiceRoller passed into each
call.
"""

from enum import Enum
from typing import Callable, Optional
import logging

from hearthside.advancement.skill_ledger import Skill
from hearthside.data_models import (
    CABIN_POSITION,
    WOOD_SHED_POSITION,
    Biome,
    DiceRoller,
    Direction,
    Indoor,
    Item,
    Outdoors,
    Room,
)
from hearthside.game_state.world_state import TreeKind, WorldState
from hearthside.items.blueprint import Blueprint, craftable_items, get_recipe
from hearthside.resolution.outcomes import Outcome, SkillCheckResult
from hearthside.world.clock import TimeOfDay
from hearthside.world.fireplace import IGNITION_THRESHOLD
from hearthside.world.world_map import MapView


logger = logging.getLogger(__name__)


# Chance a successful skill check also awards one XP
SKILL_XP_CHANCE = 0.3

CHOP_BASE_CHANCE = 50.0
CHOP_ENERGY = 5.0
CHOP_FIREWOOD_RANGE = (2, 4)
CHOP_DAMAGE_RANGE = (1.0, 5.0)

FORAGE_BASE_CHANCE = 60.0
FORAGE_TOOL_BONUS = 10.0
FORAGE_MAX_CHANCE = 0.95
FORAGE_MIN_ENERGY = 5.0
FORAGE_ENERGY = 5.0
FORAGE_FAILED_ENERGY = 3.0

LIGHT_FIRE_BASE_CHANCE = 50.0
KINDLING_BONUS = 15.0
MATCH_BONUS = 5.0
LIGHT_FIRE_MAX_CHANCE = 0.95
LIGHT_FIRE_ENERGY = 2.0

KNAP_BASE_CHANCE = 50.0
KNAP_ENERGY = 5.0
KNAP_DAMAGE_RANGE = (0.5, 2.0)

CHOP_TREE_BASE_CHANCE = 55.0
CHOP_TREE_MAX_CHANCE = 0.95
CHOP_TREE_ENERGY = 6.0
CHOP_TREE_DAMAGE_RANGE = (1.0, 3.0)

# Inclusive drop ranges for a felled tree, by kind
FELLING_YIELDS: dict[TreeKind, tuple[tuple[Item, int, int], ...]] = {
    TreeKind.PINE: (
        (Item.LOG, 2, 3), (Item.KINDLING, 2, 3), (Item.PINECONE, 1, 3), (Item.BARK, 1, 2), (Item.DRY_LEAVES, 0, 2),
    ),
    TreeKind.BIRCH: (
        (Item.LOG, 2, 4), (Item.KINDLING, 1, 2), (Item.BARK, 2, 3), (Item.DRY_LEAVES, 1, 2),
    ),
    TreeKind.APPLE: (
        (Item.LOG, 1, 3), (Item.KINDLING, 1, 2), (Item.APPLE, 1, 3), (Item.BARK, 1, 2), (Item.DRY_LEAVES, 1, 3),
    ),
    TreeKind.BAMBOO: (
        (Item.BARK, 1, 2), (Item.DRY_LEAVES, 1, 2), (Item.BAMBOO, 2, 4),
    ),
}


class Catch(str, Enum):
    SMALL = "small"
    BIG = "big"
    TRASH = "trash"
    NOTHING = "nothing"


# Base catch weights (small, big, trash, nothing)
ROD_CATCH_WEIGHTS = (45, 18, 12, 25)
HANDLINE_CATCH_WEIGHTS = (25, 6, 20, 49)

# Fish rise around dawn and dusk
FEEDING_HOURS = frozenset({TimeOfDay.DAWN, TimeOfDay.DUSK, TimeOfDay.EVENING})

FISH_MIN_ENERGY = 5.0

CATCH_ITEMS: dict[Catch, Item] = {
    Catch.SMALL: Item.SMALL_FISH,
    Catch.BIG: Item.BIG_FISH,
    Catch.TRASH: Item.DRIFTWOOD,
}

# Fixed XP per cast result: (survival, observation)
CATCH_XP: dict[Catch, tuple[int, int]] = {
    Catch.SMALL: (2, 1),
    Catch.BIG: (3, 1),
    Catch.TRASH: (1, 0),
    Catch.NOTHING: (1, 0),
}

CATCH_MESSAGES: dict[Catch, str] = {
    Catch.SMALL: "You feel a quick tug and pull up a small fish, cool and slick in your hand.",
    Catch.BIG: "A strong pull bends your line. After a short struggle you haul in a hefty fish.",
    Catch.TRASH: "Your line goes taut on something lifeless. You drag in a piece of driftwood.",
    Catch.NOTHING: "You wait with quiet patience, but nothing bites this time.",
}

COOK_TICKS = 2
COOK_ENERGY = 4.0
COOKED_PORTIONS: dict[Item, int] = {Item.SMALL_FISH: 1, Item.BIG_FISH: 2}

ADD_MATERIAL_ENERGY = 2.0

SPLIT_KINDLING_RANGE = (2, 3)

# Largest distance from a structure's tile that still counts as "at the door"
ENTER_DISTANCE = 1.5

SLEEP_TICKS = 6

WAIT_TICKS: dict[str, int] = {"short": 1, "medium": 3, "long": 6}

CUTTING_TOOLS = (Item.KNIFE, Item.STONE_KNIFE, Item.AXE, Item.STONE_AXE)
AXES = (Item.AXE, Item.STONE_AXE)

# item: (fullness, hydration, energy, mood, warmth, health)
CONSUMABLES: dict[Item, tuple[float, float, float, float, float, float]] = {
    Item.APPLE: (15.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    Item.WILD_BERRY: (5.0, 0.0, 0.0, 2.0, 0.0, 0.0),
    Item.DATE: (10.0, 8.0, 0.0, 2.0, 0.0, 0.0),
    Item.CLEAN_WATER: (0.0, 25.0, 2.0, 0.0, 0.0, 0.0),
    Item.HERBAL_TEA: (0.0, 15.0, 0.0, 5.0, 3.0, 0.0),
    Item.SMALL_FISH: (14.0, 0.0, 0.0, -2.0, 0.0, -1.0),
    Item.BIG_FISH: (22.0, 0.0, 0.0, -3.0, 0.0, -2.0),
    Item.COOKED_FISH: (30.0, 0.0, 0.0, 4.0, 0.0, 0.0),
}

CONSUME_MESSAGES: dict[Item, str] = {
    Item.APPLE: "You eat the apple.",
    Item.WILD_BERRY: "You snack on the berries.",
    Item.DATE: "Sweet dates revive you with a burst of sugar and moisture.",
    Item.CLEAN_WATER: "You drink the clean water. It tastes refreshing.",
    Item.HERBAL_TEA: "You sip the herbal tea, feeling calm and warm.",
    Item.SMALL_FISH: "You swallow the raw fish. It's briny and not entirely pleasant.",
    Item.BIG_FISH: "You eat chunks of raw fish. It fills you, though it sits heavy.",
    Item.COOKED_FISH: "You eat the warm, cooked fish. Protein and warmth spread through you.",
}

# Indoor movement: room -> direction -> next room, or None to step outside
ROOM_EXITS: dict[Room, dict[Direction, Optional[Room]]] = {
    Room.CABIN_MAIN: {
        Direction.SOUTH: None,
        Direction.NORTH: Room.CABIN_TERRACE,
        Direction.WEST: Room.WOOD_SHED,
    },
    Room.CABIN_TERRACE: {
        Direction.SOUTH: Room.CABIN_MAIN,
        Direction.WEST: Room.WOOD_SHED,
    },
    Room.WOOD_SHED: {
        Direction.EAST: Room.CABIN_MAIN,
        Direction.NORTH: Room.CABIN_TERRACE,
        Direction.SOUTH: None,
    },
}

Check = Callable[[], Optional[str]]


def first_failure(*checks: Check) -> Optional[str]:
    """Run checks in order and return the first failure reason, if any."""
    for check in checks:
        reason = check()
        if reason:
            return reason
    return None


class ActionResolver:
    """
    Resolves named player actions against a WorldState.

    Holds only the read-only map; world and dice are passed into every call.
    """

    def __init__(self, world_map: MapView):
        self.world_map = world_map

    # =========================================================================
    # SHARED CHECKS
    # =========================================================================

    @staticmethod
    def _require_room(world: WorldState, room: Room, reason: str) -> Check:
        return lambda: None if world.is_in(room) else reason

    @staticmethod
    def _require_item(world: WorldState, item: Item, reason: str, quantity: int = 1) -> Check:
        return lambda: None if world.inventory.has(item, quantity) else reason

    @staticmethod
    def _require_any(world: WorldState, items: tuple[Item, ...], reason: str) -> Check:
        return lambda: None if world.inventory.has_any(*items) else reason

    @staticmethod
    def _require_outdoors(world: WorldState, reason: str) -> Check:
        return lambda: None if world.is_outdoors else reason

    def skill_check(
        self,
        world: WorldState,
        dice: DiceRoller,
        skill: Skill,
        base_chance: float,
        bonus: float = 0.0,
        cap: Optional[float] = None,
    ) -> SkillCheckResult:
        """Roll one skill check against the player's current level."""
        level = world.skills.get(skill)
        chance = (base_chance + level / 2 + bonus) / 100
        if cap is not None:
            chance = min(chance, cap)
        roll = dice.random(reason=f"{skill.value} check")
        result = SkillCheckResult(skill.value, level, base_chance, bonus, chance, roll)
        logger.debug(
            f"{skill.value} check: roll {roll:.3f} vs {chance:.3f} -> "
            f"{'success' if result.success else 'failure'}"
        )
        return result

    def _maybe_award_xp(self, world: WorldState, dice: DiceRoller, skill: Skill) -> None:
        if dice.chance(SKILL_XP_CHANCE, reason=f"{skill.value} xp"):
            world.skills.improve(skill, 1)

    # =========================================================================
    # MOVEMENT
    # =========================================================================

    def move(self, world: WorldState, dice: DiceRoller, direction: Direction) -> Outcome:
        """Step one tile outdoors, or follow the room exits indoors."""
        if isinstance(world.location, Indoor):
            room = world.location.room
            exits = ROOM_EXITS[room]
            if direction not in exits:
                return Outcome.failure(f"There's no way {direction.value} from the {room.display_name}.")
            destination = exits[direction]
            if destination is None:
                world.location = Outdoors(room.structure_position)
                return Outcome.success(f"You step outside, leaving the {room.display_name}.")
            world.location = Indoor(destination)
            return Outcome.success(f"You walk {direction.value} into the {destination.display_name}.")

        target = world.position.moved(direction)
        if not self.world_map.is_valid(target):
            return Outcome.failure("You can't go any further that way.")
        if not self.world_map.is_walkable(target):
            return Outcome.failure("The way is blocked. You can't walk there.")
        world.location = Outdoors(target)
        biome = self.world_map.biome_at(target)
        return Outcome.success(
            f"You walk {direction.value} into the {biome.display_name}.",
            tick_cost=1,
            energy_cost=1.0,
        )

    def enter(self, world: WorldState, dice: DiceRoller, place: str) -> Outcome:
        """Enter the cabin or the wood shed from an adjacent tile."""
        name = place.strip().lower()
        if "shed" in name:
            room, door = Room.WOOD_SHED, WOOD_SHED_POSITION
        elif "cabin" in name or "house" in name:
            room, door = Room.CABIN_MAIN, CABIN_POSITION
        else:
            return Outcome.failure(f"There's no '{place}' to enter here.")

        reason = first_failure(
            self._require_outdoors(world, "You're already inside."),
            lambda: None if world.position.distance_to(door) <= ENTER_DISTANCE
            else f"The {room.display_name} is too far away.",
        )
        if reason:
            return Outcome.failure(reason)
        world.location = Indoor(room)
        return Outcome.success(f"You step into the {room.display_name}.")

    def exit(self, world: WorldState, dice: DiceRoller) -> Outcome:
        if not isinstance(world.location, Indoor):
            return Outcome.failure("You're already outside.")
        room = world.location.room
        world.location = Outdoors(room.structure_position)
        return Outcome.success(f"You leave the {room.display_name} and step outside.")

    # =========================================================================
    # WOOD SHED
    # =========================================================================

    def gather(self, world: WorldState, dice: DiceRoller, item: Item) -> Outcome:
        """
        Pick up a log, the axe or firewood in the shed, or a stone outdoors.

        The pick-up is all-or-nothing: when the pack is too full the source
        keeps the item.
        """
        if world.is_in(Room.WOOD_SHED):
            shed = world.wood_shed
            if item == Item.LOG:
                available = shed.logs > 0
            elif item == Item.AXE:
                available = shed.axe_present
            elif item == Item.FIREWOOD:
                available = shed.firewood > 0
            else:
                return Outcome.failure(f"There's no {item.display_name} to take in the wood shed.")
            if not available:
                return Outcome.failure(f"There's no {item.display_name} left in the wood shed.")
            if not world.inventory.add(item, 1):
                return Outcome.failure(f"You can't carry the {item.display_name}; your pack is too heavy.")
            if item == Item.LOG:
                shed.logs -= 1
            elif item == Item.AXE:
                shed.axe_present = False
            else:
                shed.firewood -= 1
            return Outcome.success(f"You take the {item.display_name}.", tick_cost=1, energy_cost=2.0)

        if world.is_outdoors and item == Item.STONE:
            position = world.position
            if not self.world_map.is_walkable(position):
                return Outcome.failure("There are no stones to reach here.")
            if world.stones_at(position, dice) <= 0:
                return Outcome.failure("You've already picked this spot clean of stones.")
            if not world.inventory.add(Item.STONE, 1):
                return Outcome.failure("You can't carry another stone; your pack is too heavy.")
            world.take_stone(position)
            return Outcome.success("You pick up a smooth stone.", tick_cost=1, energy_cost=2.0)

        return Outcome.failure(f"You can't find any {item.display_name} to gather here.")

    def place_log(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """Put a log on the chopping block, from the pack or the shed pile."""
        shed = world.wood_shed
        reason = first_failure(
            self._require_room(world, Room.WOOD_SHED, "The chopping block is in the wood shed."),
            lambda: "There's already a log on the chopping block." if shed.log_on_block else None,
            lambda: None if world.inventory.has(Item.LOG) or shed.logs > 0
            else "There are no logs to place.",
        )
        if reason:
            return Outcome.failure(reason)

        if world.inventory.has(Item.LOG):
            world.inventory.remove(Item.LOG, 1)
        else:
            shed.logs -= 1
        shed.log_on_block = True
        return Outcome.success(
            "You heave the heavy log onto the chopping block and position it carefully.",
            energy_cost=2.0,
        )

    def chop_log(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """
        Split the log on the chopping block into firewood.

        Success yields 2-4 firewood into the pack, stacking whatever doesn't
        fit in the shed. Failure jars the arms for 1-5 damage and leaves the
        log on the block.
        """
        shed = world.wood_shed
        reason = first_failure(
            self._require_room(world, Room.WOOD_SHED, "You need to be at the chopping block to chop wood."),
            self._require_any(world, AXES, "You need to be holding an axe to chop wood."),
            lambda: None if shed.log_on_block else "There's no log on the chopping block. Place one first.",
        )
        if reason:
            return Outcome.failure(reason)

        check = self.skill_check(world, dice, Skill.WOODCUTTING, CHOP_BASE_CHANCE)
        if not check.success:
            damage = dice.uniform(*CHOP_DAMAGE_RANGE, reason="chop mishap damage")
            world.vitals.modify_health(-damage)
            return Outcome.partial(
                "The axe glances off at an awkward angle. You wince as the jarring impact "
                f"sends pain through your arms. (-{damage:.1f} health)",
                tick_cost=1,
                energy_cost=CHOP_ENERGY,
            )

        shed.log_on_block = False
        pieces = dice.randint(*CHOP_FIREWOOD_RANGE, reason="firewood pieces")
        carried = 0
        for _ in range(pieces):
            if world.inventory.add(Item.FIREWOOD, 1):
                carried += 1
        stacked = pieces - carried
        shed.firewood += stacked
        self._maybe_award_xp(world, dice, Skill.WOODCUTTING)

        message = f"THWACK! The axe bites deep and the log splits cleanly into {pieces} pieces of firewood."
        if stacked:
            message += f" You stack {stacked} in the shed; your pack is full."
        return Outcome.success(message, tick_cost=1, energy_cost=CHOP_ENERGY, pieces=pieces, stacked=stacked)

    def split_firewood(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """Shave one piece of firewood into 2-3 bundles of kindling."""
        reason = first_failure(
            self._require_any(world, AXES, "You need an axe to split firewood."),
            self._require_item(world, Item.FIREWOOD, "You don't have any firewood to split."),
        )
        if reason:
            return Outcome.failure(reason)

        world.inventory.remove(Item.FIREWOOD, 1)
        bundles = dice.randint(*SPLIT_KINDLING_RANGE, reason="kindling bundles")
        if not world.inventory.add(Item.KINDLING, bundles):
            world.inventory.add(Item.FIREWOOD, 1)
            return Outcome.failure("You have no room for the kindling.")
        return Outcome.success(
            f"You shave down a piece of firewood with careful axe strokes, producing {bundles} bundles of kindling.",
            tick_cost=1,
            energy_cost=2.0,
        )

    # =========================================================================
    # TREES
    # =========================================================================

    def chop_tree(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """
        Swing an axe at the standing tree on the current tile.

        Each successful stroke adds one hit. The stroke that reaches the
        tree's hit count fells it: drops go into the pack, logs that don't
        fit are hauled to the wood shed pile and anything else is left
        behind. A glancing stroke costs 1-3 health and makes no progress.
        """
        position = world.position
        biome = self.world_map.biome_at(position)
        reason = first_failure(
            self._require_outdoors(world, "You need to be outside near a tree."),
            self._require_any(world, AXES, "You need an axe to chop down a tree."),
            lambda: None if self.world_map.is_walkable(position) else "You can't reach a tree from here.",
        )
        if reason:
            return Outcome.failure(reason)

        tree = world.tree_at(position, biome, dice)
        if tree is None:
            return Outcome.failure("You don't see a tree close enough to chop.")
        if tree.felled:
            return Outcome.failure("Only a stump is left here. A new tree will take time to grow.")

        check = self.skill_check(
            world, dice, Skill.WOODCUTTING, CHOP_TREE_BASE_CHANCE, cap=CHOP_TREE_MAX_CHANCE,
        )
        if not check.success:
            damage = dice.uniform(*CHOP_TREE_DAMAGE_RANGE, reason="glancing swing damage")
            world.vitals.modify_health(-damage)
            return Outcome.partial(
                f"Your swing glances off the trunk, jarring your arms (-{damage:.1f} health). "
                f"{tree.progress_text()}",
                tick_cost=1,
                energy_cost=CHOP_TREE_ENERGY,
            )

        felled = tree.strike()
        self._maybe_award_xp(world, dice, Skill.WOODCUTTING)
        if not felled:
            return Outcome.success(
                f"Your axe bites into the {tree.kind.display_name}. {tree.progress_text()}",
                tick_cost=1,
                energy_cost=CHOP_TREE_ENERGY,
                hits=tree.hits_done,
            )

        carried, hauled, left_behind = self._fell_drops(world, dice, tree.kind)
        logger.info(f"Felled a {tree.kind.display_name} at {position.key()}")
        if tree.kind == TreeKind.BAMBOO:
            message = "With a final swing, the bamboo stalks topple."
        else:
            message = (
                f"With a final swing, the {tree.kind.display_name} creaks and crashes down. "
                f"You gain {carried.get(Item.LOG, 0) + hauled} logs and "
                f"{carried.get(Item.KINDLING, 0)} bundles of kindling."
            )
        if hauled:
            message += f" {hauled} log{'s' if hauled != 1 else ''} won't fit in your pack; you haul them to the wood shed."
        if left_behind:
            message += " Some of the smaller pieces are left behind."
        return Outcome.success(
            message,
            tick_cost=1,
            energy_cost=CHOP_TREE_ENERGY,
            felled=tree.kind.value,
            found={item.value: qty for item, qty in carried.items()},
            hauled=hauled,
        )

    def _fell_drops(
        self,
        world: WorldState,
        dice: DiceRoller,
        kind: TreeKind,
    ) -> tuple[dict[Item, int], int, bool]:
        """Roll and pack a felled tree's drops; surplus logs go to the shed."""
        carried: dict[Item, int] = {}
        hauled = 0
        left_behind = False
        for item, low, high in FELLING_YIELDS[kind]:
            quantity = dice.randint(low, high, reason=f"{kind.value} {item.value}")
            for _ in range(quantity):
                if world.inventory.add(item, 1):
                    carried[item] = carried.get(item, 0) + 1
                elif item == Item.LOG:
                    hauled += 1
                else:
                    left_behind = True
        world.wood_shed.logs += hauled
        return carried, hauled, left_behind

    # =========================================================================
    # FIRE
    # =========================================================================

    def add_fuel(self, world: WorldState, dice: DiceRoller, item: Item) -> Outcome:
        """Feed a flammable item to the fireplace without lighting it."""
        reason = first_failure(
            self._require_room(world, Room.CABIN_MAIN, "You need to be by the fireplace."),
            lambda: None if item.is_flammable else f"The {item.display_name} won't help the fire.",
            self._require_item(world, item, f"You don't have any {item.display_name} to add."),
        )
        if reason:
            return Outcome.failure(reason)

        world.inventory.remove(item, 1)
        world.fireplace.add_fuel(item.fuel_value or 0.0)
        if world.fireplace.state.is_lit:
            message = f"You feed the flames with the {item.display_name}."
        else:
            message = f"You set the {item.display_name} into the fireplace."
            if item.is_tinder:
                message += " It should help the fire catch when you strike a match."
        return Outcome.success(message, fuel=world.fireplace.fuel)

    def light_fire(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """
        Strike a match at the hearth.

        Carried kindling goes in first for a +15 bonus; if the attempt fails
        the kindling has burned away (PartialSuccess). A bare match gives +5
        and a failure costs nothing but the effort (Failure).
        """
        fireplace = world.fireplace
        has_kindling = world.inventory.has(Item.KINDLING)
        kindling_fuel = Item.KINDLING.fuel_value or 0.0
        usable_fuel = fireplace.fuel + (kindling_fuel if has_kindling else 0.0)

        reason = first_failure(
            self._require_room(world, Room.CABIN_MAIN, "You need to be by the fireplace to do that."),
            self._require_item(world, Item.MATCHBOX, "You need your matchbox to strike a flame."),
            lambda: "The fire is already lit." if fireplace.state.is_lit else None,
            lambda: None if usable_fuel >= IGNITION_THRESHOLD else (
                "There's not enough fuel in the fireplace. Add firewood, bark, leaves "
                "or another fuel source first."
            ),
        )
        if reason:
            return Outcome.failure(reason)

        if has_kindling:
            world.inventory.remove(Item.KINDLING, 1)
        bonus = KINDLING_BONUS if has_kindling else MATCH_BONUS
        check = self.skill_check(
            world, dice, Skill.FIRE_MAKING, LIGHT_FIRE_BASE_CHANCE, bonus, cap=LIGHT_FIRE_MAX_CHANCE,
        )

        if not check.success:
            if has_kindling:
                return Outcome.partial(
                    "The kindling flares and dies before the larger fuel takes. "
                    "Add fresh kindling and try again.",
                    energy_cost=LIGHT_FIRE_ENERGY,
                )
            return Outcome.failure(
                "The match sputters out before the fuel catches.",
                energy_cost=LIGHT_FIRE_ENERGY,
            )

        if has_kindling:
            fireplace.add_fuel(kindling_fuel)
        fireplace.ignite()
        self._maybe_award_xp(world, dice, Skill.FIRE_MAKING)
        return Outcome.success(
            "You strike a match and the tinder catches. The larger fuel begins to smolder.",
            energy_cost=LIGHT_FIRE_ENERGY,
        )

    # =========================================================================
    # STONE AND FORAGING
    # =========================================================================

    def knap_stone(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """
        Strike two stones together for a sharp flake.

        One stone is used up either way: it becomes a sharp stone on
        success and shatters on failure, grazing the hand.
        """
        reason = self._require_item(world, Item.STONE, "You need two stones to knap one against the other.", 2)()
        if reason:
            return Outcome.failure(reason)

        world.inventory.remove(Item.STONE, 1)
        check = self.skill_check(world, dice, Skill.STONEMASONRY, KNAP_BASE_CHANCE)
        if not check.success:
            damage = dice.uniform(*KNAP_DAMAGE_RANGE, reason="knapping graze")
            world.vitals.modify_health(-damage)
            return Outcome.partial(
                f"The stone shatters into useless fragments and a chip grazes your hand. (-{damage:.1f} health)",
                tick_cost=1,
                energy_cost=KNAP_ENERGY,
            )

        if not world.inventory.add(Item.SHARP_STONE, 1):
            world.inventory.add(Item.STONE, 1)
            return Outcome.failure("You have no room for the sharp stone.")
        self._maybe_award_xp(world, dice, Skill.STONEMASONRY)
        return Outcome.success(
            "You smash the stones together, flaking off a razor-sharp edge.",
            tick_cost=1,
            energy_cost=KNAP_ENERGY,
        )

    def forage(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """
        Search the brush on the current tile.

        A carried blade or axe adds +10 to the check. Each success spends one
        charge of the tile's forage node; an empty node must regrow.
        """
        position = world.position
        reason = first_failure(
            self._require_outdoors(world, "There's nothing to forage indoors."),
            lambda: None if self.world_map.is_walkable(position) else "You can't forage here.",
            lambda: None if world.vitals.energy >= FORAGE_MIN_ENERGY else "You are too exhausted to forage.",
        )
        if reason:
            return Outcome.failure(reason)

        biome = self.world_map.biome_at(position)
        node = world.forage_node_at(position, biome, dice)
        if node.is_depleted:
            return Outcome.failure("The brush here is picked clean. Give it some time to recover.")

        has_tool = world.inventory.has_any(*CUTTING_TOOLS)
        check = self.skill_check(
            world, dice, Skill.FORAGING, FORAGE_BASE_CHANCE,
            FORAGE_TOOL_BONUS if has_tool else 0.0, cap=FORAGE_MAX_CHANCE,
        )
        if not check.success:
            return Outcome.failure(
                "You search for a while but find nothing useful.",
                tick_cost=1,
                energy_cost=FORAGE_FAILED_ENERGY,
            )

        found, left_behind = self._forage_drops(world, dice, biome, check.level, has_tool)
        node.spend()
        self._maybe_award_xp(world, dice, Skill.FORAGING)

        food = {Item.WILD_BERRY, Item.DATE, Item.WILD_HERBS}
        if any(item in food for item in found):
            message = "You rummage through the bushes and come away with something to eat and a handful of useful materials."
        else:
            message = "You rummage through the brush and find useful materials."
        if left_behind:
            message += " Your pack is too full to take everything."
        return Outcome.success(
            message,
            tick_cost=1,
            energy_cost=FORAGE_ENERGY,
            found={item.value: qty for item, qty in found.items()},
        )

    def _forage_drops(
        self,
        world: WorldState,
        dice: DiceRoller,
        biome: Biome,
        skill: int,
        has_tool: bool,
    ) -> tuple[dict[Item, int], bool]:
        """Roll and pack the finds of a successful forage."""
        rolls: list[Item] = [Item.STICK]
        if dice.chance(min(0.3 + skill * 0.01, 0.8), reason="extra stick"):
            rolls.append(Item.STICK)

        fiber_chance = min(0.35 + skill * 0.005 + (0.15 if has_tool else 0.0), 0.85)
        for _ in range(2 if has_tool else 1):
            if dice.chance(fiber_chance, reason="plant fiber"):
                rolls.append(Item.PLANT_FIBER)
        if dice.chance(0.25, reason="stone"):
            rolls.append(Item.STONE)

        berry_bonus = {
            Biome.SPRING_FOREST: 0.25,
            Biome.MIXED_FOREST: 0.25,
            Biome.BAMBOO_GROVE: 0.25,
            Biome.OASIS: 0.25,
            Biome.LAKE: 0.15,
        }.get(biome, 0.0)
        berry_chance = min(0.25 + berry_bonus + skill * 0.005, 0.9)
        for _ in range(3):
            if dice.chance(berry_chance, reason="wild berry"):
                rolls.append(Item.WILD_BERRY)
        if biome in (Biome.OASIS, Biome.DESERT) and dice.chance(0.15, reason="date"):
            rolls.append(Item.DATE)
        if dice.chance(0.12, reason="wild herbs"):
            rolls.append(Item.WILD_HERBS)

        found: dict[Item, int] = {}
        left_behind = False
        for item in rolls:
            if world.inventory.add(item, 1):
                found[item] = found.get(item, 0) + 1
            else:
                left_behind = True
        return found, left_behind

    # =========================================================================
    # BLUEPRINTS
    # =========================================================================

    def start_project(self, world: WorldState, dice: DiceRoller, target: Item) -> Outcome:
        if world.active_project is not None:
            return Outcome.failure(
                f"You're already working on a {world.active_project.target_item.display_name}. "
                "Finish or abandon it first."
            )
        blueprint = Blueprint.new(target)
        if blueprint is None:
            known = ", ".join(item.display_name for item in craftable_items())
            return Outcome.failure(f"You don't know how to make a {target.display_name}. Known blueprints: {known}.")
        world.active_project = blueprint
        return Outcome.success(f"You start a blueprint. {blueprint.status_description()}")

    def add_material(self, world: WorldState, dice: DiceRoller, item: Item) -> Outcome:
        """
        Add one unit of an ingredient to the active blueprint.

        The addition that completes the blueprint always assembles it: the
        blueprint is consumed, the finished item and the recipe's XP award
        are granted, and the outcome carries the build time and effort.
        """
        blueprint = world.active_project
        reason = first_failure(
            lambda: None if blueprint is not None
            else "You don't have an active blueprint. Start a project first.",
            self._require_item(world, item, f"You don't have any {item.display_name}."),
            lambda: None if blueprint.needs(item)
            else f"The {blueprint.target_item.display_name} doesn't need any (more) {item.display_name}.",
        )
        if reason:
            return Outcome.failure(reason)

        completes = blueprint.missing_materials() == {item: 1}
        target = blueprint.target_item
        if completes and not world.inventory.fits(target.weight - item.weight):
            return Outcome.failure(f"You won't be able to carry the {target.display_name}. Lighten your pack first.")

        world.inventory.remove(item, 1)
        blueprint.add_material(item)
        if not completes:
            return Outcome.success(
                f"You add the {item.display_name} to the {target.display_name}. "
                f"Progress: {blueprint.progress_summary()}.",
                tick_cost=1,
                energy_cost=ADD_MATERIAL_ENERGY,
            )

        recipe = blueprint.recipe
        world.inventory.add(target, 1)
        world.active_project = None
        if recipe.xp_award:
            world.skills.improve(recipe.skill, recipe.xp_award)
        logger.info(f"Crafted {target.value}")
        return Outcome.success(
            f"You finish crafting the {target.display_name}. It is ready to use.",
            tick_cost=blueprint.assembly_ticks(),
            energy_cost=blueprint.assembly_energy(),
            crafted=target.value,
        )

    def abandon_project(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """Drop the active blueprint, taking back what materials fit in the pack."""
        blueprint = world.active_project
        if blueprint is None:
            return Outcome.failure("You don't have an active blueprint to abandon.")

        returned = 0
        lost = 0
        for item, quantity in blueprint.added_materials():
            for _ in range(quantity):
                if world.inventory.add(item, 1):
                    returned += 1
                else:
                    lost += 1
        world.active_project = None

        message = f"You abandon the {blueprint.target_item.display_name}."
        if returned:
            message += f" You recover {returned} material{'s' if returned != 1 else ''}."
        if lost:
            message += f" {lost} won't fit in your pack and {'are' if lost != 1 else 'is'} left behind."
        return Outcome.success(message)

    # =========================================================================
    # FISHING
    # =========================================================================

    def catch_weights(self, world: WorldState, use_rod: bool, stormy: bool) -> list[tuple[Catch, int]]:
        """Weighted catch table for one cast under the current conditions."""
        small, big, trash, nothing = ROD_CATCH_WEIGHTS if use_rod else HANDLINE_CATCH_WEIGHTS
        if world.clock.time_of_day() in FEEDING_HOURS:
            small += 6
            big += 4
            nothing -= 8
        if stormy:
            small -= 5
            big -= 3
            trash += 6
            nothing += 6
        bonus = world.skills.get(Skill.SURVIVAL) // 12 + world.skills.get(Skill.OBSERVATION) // 20
        small += bonus
        nothing -= bonus
        return [
            (Catch.SMALL, max(small, 0)),
            (Catch.BIG, max(big, 0)),
            (Catch.TRASH, max(trash, 0)),
            (Catch.NOTHING, max(nothing, 0)),
        ]

    def fish(self, world: WorldState, dice: DiceRoller, gear: str = "") -> Outcome:
        """
        Cast a line from the shore of the lake or the oasis.

        A carried fishing rod is used unless gear names something else, in
        which case the player fishes by hand. Storms make the outing longer
        and tilt the table toward driftwood and empty casts. Every cast
        trains survival; fish also train observation.
        """
        wants_rod = (
            any(word in gear.lower() for word in ("rod", "pole"))
            if gear.strip() else world.inventory.has(Item.FISHING_ROD)
        )
        reason = first_failure(
            self._require_outdoors(world, "You need to be right by the lake or oasis shore to fish."),
            lambda: None if self.world_map.is_near_water(world.position)
            else "You need to be right by the lake or oasis shore to fish.",
            lambda: None if world.vitals.energy >= FISH_MIN_ENERGY else "You are too exhausted to fish.",
            lambda: None if not wants_rod or world.inventory.has(Item.FISHING_ROD)
            else "You don't have a fishing rod.",
        )
        if reason:
            return Outcome.failure(reason)

        stormy = world.weather.weather_at(world.position).is_severe
        tick_cost = 2 if wants_rod else 1
        energy_cost = 5.0 if wants_rod else 4.0
        if stormy:
            tick_cost += 1
            energy_cost += 2.0

        catch = dice.weighted_choice(self.catch_weights(world, wants_rod, stormy), reason="fishing catch")
        if catch == Catch.BIG:
            tick_cost += 1
            energy_cost += 1.0

        survival_xp, observation_xp = CATCH_XP[catch]
        world.skills.improve(Skill.SURVIVAL, survival_xp)
        if observation_xp:
            world.skills.improve(Skill.OBSERVATION, observation_xp)

        item = CATCH_ITEMS.get(catch)
        if item is None:
            return Outcome.failure(CATCH_MESSAGES[catch], tick_cost=tick_cost, energy_cost=energy_cost)
        if not world.inventory.add(item, 1):
            return Outcome.failure(
                f"Your pack is too heavy to stow the {item.display_name}. You let it go.",
                tick_cost=tick_cost,
                energy_cost=energy_cost,
            )
        return Outcome.success(
            CATCH_MESSAGES[catch],
            tick_cost=tick_cost,
            energy_cost=energy_cost,
            catch=catch.value,
        )

    def cook_fish(self, world: WorldState, dice: DiceRoller, item: Item = Item.SMALL_FISH) -> Outcome:
        """Grill a raw fish at the lit hearth; a big fish yields two portions."""
        portions = COOKED_PORTIONS.get(item)
        reason = first_failure(
            lambda: None if portions else f"You can't cook the {item.display_name} over the fire.",
            self._require_room(world, Room.CABIN_MAIN, "You need to be by a lit fireplace to cook that right now."),
            lambda: None if world.fireplace.state.is_lit
            else "You need to be by a lit fireplace to cook that right now.",
            self._require_item(world, item, "You don't have a fish to cook."),
            lambda: None if world.inventory.fits(portions * Item.COOKED_FISH.weight - item.weight)
            else "You have no room for the cooked fish.",
        )
        if reason:
            return Outcome.failure(reason)

        tick_cost = COOK_TICKS + (1 if portions > 1 else 0)
        energy_cost = COOK_ENERGY
        if world.weather.weather_at(world.position).is_severe:
            tick_cost += 1
            energy_cost += 2.0

        world.inventory.remove(item, 1)
        world.inventory.add(Item.COOKED_FISH, portions)
        self._maybe_award_xp(world, dice, Skill.COOKING)
        if portions > 1:
            message = "You portion the large fish into hearty fillets and grill them until they flake easily."
        else:
            message = "You grill the fish over the fire until it flakes easily."
        return Outcome.success(message, tick_cost=tick_cost, energy_cost=energy_cost, portions=portions)

    # =========================================================================
    # WATER, TEA AND FOOD
    # =========================================================================

    def fetch_water(self, world: WorldState, dice: DiceRoller) -> Outcome:
        reason = first_failure(
            self._require_outdoors(world, "You need to be outside by the lake to fetch water."),
            lambda: None if self.world_map.is_near_water(world.position) else "There's no water close enough.",
            self._require_item(world, Item.KETTLE, "You need an empty kettle to carry water."),
            lambda: None if world.inventory.fits(Item.WATER_KETTLE.weight - Item.KETTLE.weight)
            else "A full kettle would be too heavy to carry.",
        )
        if reason:
            return Outcome.failure(reason)

        world.inventory.remove(Item.KETTLE, 1)
        world.inventory.add(Item.WATER_KETTLE, 1)
        return Outcome.success("You fill the kettle with cold lake water.", tick_cost=1, energy_cost=2.0)

    def boil_water(self, world: WorldState, dice: DiceRoller) -> Outcome:
        reason = first_failure(
            self._require_room(world, Room.CABIN_MAIN, "You need the fireplace to boil water."),
            self._require_item(world, Item.WATER_KETTLE, "You need a kettle of water to boil."),
            lambda: None if world.fireplace.state.is_lit else "The fire isn't lit.",
        )
        if reason:
            return Outcome.failure(reason)

        world.inventory.remove(Item.WATER_KETTLE, 1)
        world.inventory.add(Item.KETTLE, 1)
        if not world.inventory.add(Item.CLEAN_WATER, 1):
            world.inventory.remove(Item.KETTLE, 1)
            world.inventory.add(Item.WATER_KETTLE, 1)
            return Outcome.failure("You have nowhere to keep the boiled water.")
        return Outcome.success(
            "The kettle sings over the fire. You now have clean, boiled water.",
            tick_cost=1,
            energy_cost=1.0,
        )

    def brew_tea(self, world: WorldState, dice: DiceRoller) -> Outcome:
        reason = first_failure(
            self._require_item(world, Item.CLEAN_WATER, "You need clean water to brew tea."),
            self._require_item(world, Item.WILD_HERBS, "You need some wild herbs to steep."),
            self._require_item(world, Item.TEA_CUP, "You need a cup to brew tea in."),
        )
        if reason:
            return Outcome.failure(reason)

        for item in (Item.CLEAN_WATER, Item.WILD_HERBS, Item.TEA_CUP):
            world.inventory.remove(item, 1)
        world.inventory.add(Item.HERBAL_TEA, 1)
        self._maybe_award_xp(world, dice, Skill.COOKING)
        return Outcome.success(
            "You steep the herbs in the hot water. A fragrant cup of herbal tea is ready.",
            tick_cost=1,
            energy_cost=1.0,
        )

    def consume(self, world: WorldState, dice: DiceRoller, item: Item) -> Outcome:
        reason = first_failure(
            lambda: None if item in CONSUMABLES else f"You can't eat or drink the {item.display_name}.",
            self._require_item(world, item, f"You don't have any {item.display_name}."),
        )
        if reason:
            return Outcome.failure(reason)

        world.inventory.remove(item, 1)
        fullness, hydration, energy, mood, warmth, health = CONSUMABLES[item]
        vitals = world.vitals
        vitals.modify_fullness(fullness)
        vitals.modify_hydration(hydration)
        vitals.modify_energy(energy)
        vitals.modify_mood(mood)
        vitals.modify_warmth(warmth)
        if health:
            vitals.modify_health(health)
        if item == Item.HERBAL_TEA:
            # The cup comes back empty
            world.inventory.add(Item.TEA_CUP, 1)
        return Outcome.success(CONSUME_MESSAGES[item], tick_cost=1)

    # =========================================================================
    # REST
    # =========================================================================

    def sleep(self, world: WorldState, dice: DiceRoller) -> Outcome:
        """Sleep for an hour: restores energy and mood, heals more when fed."""
        vitals = world.vitals
        well_fed = vitals.fullness >= 60.0 and vitals.hydration >= 50.0
        vitals.modify_energy(25.0)
        vitals.modify_mood(6.0)
        vitals.modify_fullness(-5.0)
        vitals.modify_hydration(-5.0)
        vitals.modify_health(15.0 if well_fed else 5.0)
        message = "You sleep deeply and wake refreshed."
        if not well_fed:
            message += " Hunger and thirst kept the rest from doing you much good."
        return Outcome.success(message, tick_cost=SLEEP_TICKS)

    def wait(self, world: WorldState, dice: DiceRoller, duration: str = "short") -> Outcome:
        ticks = WAIT_TICKS.get(duration.strip().lower())
        if ticks is None:
            return Outcome.failure(f"Unknown duration '{duration}'. Choose short, medium or long.")
        return Outcome.success("You wait and let the time pass.", tick_cost=ticks)
