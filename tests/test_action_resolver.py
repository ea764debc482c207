"""
Tests for the action resolver.

Skill checks are forced by patching DiceRoller.random: 0.0 passes every
check (and every XP roll), 0.999 fails every one.
"""

from unittest.mock import MagicMock, patch

import pytest

from hearthside.advancement.skill_ledger import Skill, SkillLedger
from hearthside.data_models import (
    CABIN_POSITION,
    START_POSITION,
    WOOD_SHED_POSITION,
    Direction,
    Indoor,
    Item,
    Outdoors,
    Position,
    Room,
)
from hearthside.game_state.world_state import ForageNode, Tree, TreeKind
from hearthside.items.inventory import Inventory
from hearthside.player.vitals import Vitals
from hearthside.resolution.action_resolver import Catch, first_failure
from hearthside.resolution.outcomes import OutcomeStatus
from hearthside.weather.weather_types import WeatherCondition, WeatherField
from hearthside.world.clock import Clock


PASS = 0.0
FAIL = 0.999


# =============================================================================
# MOVEMENT
# =============================================================================


class TestMovement:
    """Tests for move, enter and exit."""

    def test_outdoor_step(self, resolver, fresh_world, seeded_dice):
        """A walkable step moves one tile and costs a tick."""
        outcome = resolver.move(fresh_world, seeded_dice, Direction.NORTH)
        assert outcome.status == OutcomeStatus.TIMED
        assert outcome.tick_cost == 1
        assert outcome.energy_cost == 1.0
        assert fresh_world.position == Position(4, 0)

    def test_blocked_by_lake(self, resolver, fresh_world, seeded_dice):
        """Lake tiles cannot be entered."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        outcome = resolver.move(fresh_world, seeded_dice, Direction.NORTH)
        assert outcome.failed
        assert outcome.tick_cost == 0
        assert fresh_world.position == CABIN_POSITION

    def test_edge_of_map(self, resolver, fresh_world, seeded_dice):
        """Stepping off the map fails."""
        fresh_world.location = Outdoors(Position(50, 0))
        outcome = resolver.move(fresh_world, seeded_dice, Direction.SOUTH)
        assert outcome.failed
        assert "further" in outcome.message

    def test_room_exits(self, resolver, cabin_world, seeded_dice):
        """Indoor moves follow the room graph and take no time."""
        outcome = resolver.move(cabin_world, seeded_dice, Direction.NORTH)
        assert outcome.status == OutcomeStatus.SUCCESS
        assert cabin_world.is_in(Room.CABIN_TERRACE)

        resolver.move(cabin_world, seeded_dice, Direction.WEST)
        assert cabin_world.is_in(Room.WOOD_SHED)

        assert resolver.move(cabin_world, seeded_dice, Direction.WEST).failed

        resolver.move(cabin_world, seeded_dice, Direction.SOUTH)
        assert cabin_world.location == Outdoors(WOOD_SHED_POSITION)

    def test_enter_adjacent(self, resolver, fresh_world, seeded_dice):
        """Structures can be entered from a neighbouring tile."""
        fresh_world.location = Outdoors(Position(0, 1))
        assert resolver.enter(fresh_world, seeded_dice, "the cabin").succeeded
        assert fresh_world.is_in(Room.CABIN_MAIN)

        fresh_world.location = Outdoors(CABIN_POSITION)
        assert resolver.enter(fresh_world, seeded_dice, "shed").succeeded
        assert fresh_world.is_in(Room.WOOD_SHED)

    def test_enter_failures(self, resolver, fresh_world, seeded_dice):
        """Too far, unknown places and already-inside all fail."""
        far = resolver.enter(fresh_world, seeded_dice, "cabin")
        assert far.failed
        assert "too far" in far.message
        assert resolver.enter(fresh_world, seeded_dice, "barn").failed

        fresh_world.location = Indoor(Room.CABIN_MAIN)
        assert resolver.enter(fresh_world, seeded_dice, "shed").message == "You're already inside."

    def test_exit(self, resolver, shed_world, seeded_dice):
        """Leaving puts the player on the structure's tile."""
        assert resolver.exit(shed_world, seeded_dice).succeeded
        assert shed_world.location == Outdoors(WOOD_SHED_POSITION)
        assert resolver.exit(shed_world, seeded_dice).failed


# =============================================================================
# WOOD SHED
# =============================================================================


class TestWoodShed:
    """Tests for gathering, placing, chopping and splitting."""

    def test_gather_log(self, resolver, shed_world, seeded_dice):
        """Taking a log moves it from the pile into the pack."""
        outcome = resolver.gather(shed_world, seeded_dice, Item.LOG)
        assert outcome.succeeded
        assert shed_world.inventory.quantity(Item.LOG) == 1
        assert shed_world.wood_shed.logs == 7

    def test_gather_axe_once(self, resolver, shed_world, seeded_dice):
        """There is only one axe on the hook."""
        assert resolver.gather(shed_world, seeded_dice, Item.AXE).succeeded
        assert not shed_world.wood_shed.axe_present
        assert resolver.gather(shed_world, seeded_dice, Item.AXE).failed

    def test_gather_too_heavy_leaves_source_intact(self, resolver, shed_world, seeded_dice):
        """A refused pick-up does not take the log from the pile."""
        shed_world.inventory = Inventory(max_weight=4.5)
        outcome = resolver.gather(shed_world, seeded_dice, Item.LOG)
        assert outcome.failed
        assert shed_world.wood_shed.logs == 8
        assert shed_world.inventory.is_empty()

    def test_gather_stone_outdoors(self, resolver, fresh_world, seeded_dice):
        """Stones come from the tile's deposit until it is empty."""
        assert resolver.gather(fresh_world, seeded_dice, Item.STONE).succeeded
        assert fresh_world.inventory.quantity(Item.STONE) == 1

        fresh_world.stone_deposits[START_POSITION] = 0
        assert resolver.gather(fresh_world, seeded_dice, Item.STONE).failed
        assert resolver.gather(fresh_world, seeded_dice, Item.LOG).failed

    def test_no_stones_on_water(self, resolver, shed_world, seeded_dice):
        """Stepping out of the shed lands on lake; no stone can be picked up there."""
        resolver.exit(shed_world, seeded_dice)
        outcome = resolver.gather(shed_world, seeded_dice, Item.STONE)
        assert outcome.failed
        assert shed_world.inventory.quantity(Item.STONE) == 0
        assert WOOD_SHED_POSITION not in shed_world.stone_deposits

    def test_place_log_from_pile(self, resolver, shed_world, seeded_dice):
        """With no log in the pack, the shed pile supplies one."""
        outcome = resolver.place_log(shed_world, seeded_dice)
        assert outcome.succeeded
        assert outcome.tick_cost == 0
        assert shed_world.wood_shed.log_on_block
        assert shed_world.wood_shed.logs == 7
        assert resolver.place_log(shed_world, seeded_dice).failed

    def test_place_log_from_pack_first(self, resolver, shed_world, seeded_dice):
        """A carried log is used before the pile."""
        shed_world.inventory.add(Item.LOG)
        resolver.place_log(shed_world, seeded_dice)
        assert shed_world.inventory.quantity(Item.LOG) == 0
        assert shed_world.wood_shed.logs == 8

    def test_chop_requires_axe(self, resolver, shed_world, seeded_dice):
        """Without an axe nothing happens."""
        shed_world.wood_shed.log_on_block = True
        outcome = resolver.chop_log(shed_world, seeded_dice)
        assert outcome.failed
        assert "axe" in outcome.message
        assert shed_world.wood_shed.log_on_block

    def test_chop_success(self, resolver, shed_world, seeded_dice):
        """A clean split yields 2-4 firewood and may award woodcutting XP."""
        shed_world.inventory.add(Item.AXE)
        shed_world.wood_shed.log_on_block = True
        with patch.object(seeded_dice, "random", return_value=PASS):
            outcome = resolver.chop_log(shed_world, seeded_dice)

        assert outcome.succeeded
        assert outcome.tick_cost == 1
        assert 2 <= shed_world.inventory.quantity(Item.FIREWOOD) <= 4
        assert not shed_world.wood_shed.log_on_block
        assert shed_world.skills.progress(Skill.WOODCUTTING).xp == 1

    def test_chop_surplus_stacks_in_shed(self, resolver, shed_world, seeded_dice):
        """Firewood that doesn't fit in the pack is stacked in the shed."""
        shed_world.inventory = Inventory(max_weight=4.5)
        shed_world.inventory.add(Item.AXE)
        shed_world.wood_shed.log_on_block = True
        with patch.object(seeded_dice, "random", return_value=PASS):
            outcome = resolver.chop_log(shed_world, seeded_dice)

        assert shed_world.inventory.quantity(Item.FIREWOOD) == 1
        assert shed_world.wood_shed.firewood == outcome.details["pieces"] - 1
        assert outcome.details["stacked"] == shed_world.wood_shed.firewood

    def test_chop_failure_hurts(self, resolver, shed_world, seeded_dice):
        """A glancing blow costs health and leaves the log on the block."""
        shed_world.inventory.add(Item.AXE)
        shed_world.wood_shed.log_on_block = True
        with patch.object(seeded_dice, "random", return_value=FAIL):
            outcome = resolver.chop_log(shed_world, seeded_dice)

        assert outcome.is_partial
        assert outcome.energy_cost == 5.0
        assert 95.0 <= shed_world.vitals.health <= 99.0
        assert shed_world.wood_shed.log_on_block

    def test_split_firewood(self, resolver, fresh_world, seeded_dice):
        """One firewood becomes 2-3 kindling."""
        fresh_world.inventory.add(Item.STONE_AXE)
        fresh_world.inventory.add(Item.FIREWOOD)
        assert resolver.split_firewood(fresh_world, seeded_dice).succeeded
        assert fresh_world.inventory.quantity(Item.FIREWOOD) == 0
        assert 2 <= fresh_world.inventory.quantity(Item.KINDLING) <= 3

    def test_split_requires_axe(self, resolver, fresh_world, seeded_dice):
        """Splitting without an axe fails and keeps the firewood."""
        fresh_world.inventory.add(Item.FIREWOOD)
        assert resolver.split_firewood(fresh_world, seeded_dice).failed
        assert fresh_world.inventory.quantity(Item.FIREWOOD) == 1


# =============================================================================
# FIRE
# =============================================================================


class TestFire:
    """Tests for feeding and lighting the fireplace."""

    def test_add_fuel(self, resolver, cabin_world, seeded_dice):
        """Fuel goes in without lighting the fire."""
        cabin_world.inventory.add(Item.FIREWOOD)
        outcome = resolver.add_fuel(cabin_world, seeded_dice, Item.FIREWOOD)
        assert outcome.succeeded
        assert cabin_world.fireplace.fuel == 30.0
        assert not cabin_world.fireplace.state.is_lit
        assert cabin_world.inventory.quantity(Item.FIREWOOD) == 0

    def test_add_fuel_rejects(self, resolver, cabin_world, seeded_dice):
        """Non-flammable items, missing items and the wrong room are refused."""
        assert resolver.add_fuel(cabin_world, seeded_dice, Item.APPLE).failed
        assert resolver.add_fuel(cabin_world, seeded_dice, Item.LOG).failed

        cabin_world.location = Indoor(Room.CABIN_TERRACE)
        cabin_world.inventory.add(Item.STICK)
        assert resolver.add_fuel(cabin_world, seeded_dice, Item.STICK).failed
        assert cabin_world.fireplace.fuel == 0.0

    def test_light_with_kindling_just_inside_chance(self, resolver, cabin_world, seeded_dice):
        """Kindling makes the chance (50 + 5 + 15)% at level 10; 0.69 lights it."""
        cabin_world.inventory.add(Item.KINDLING)
        with patch.object(seeded_dice, "random", return_value=0.69):
            outcome = resolver.light_fire(cabin_world, seeded_dice)

        assert outcome.succeeded
        assert outcome.energy_cost == 2.0
        assert cabin_world.fireplace.state.is_lit
        assert cabin_world.fireplace.fuel == 10.0
        assert cabin_world.inventory.quantity(Item.KINDLING) == 0

    def test_light_with_kindling_just_outside_chance(self, resolver, cabin_world, seeded_dice):
        """A failed attempt with kindling burns it away: partial success."""
        cabin_world.inventory.add(Item.KINDLING)
        with patch.object(seeded_dice, "random", return_value=0.71):
            outcome = resolver.light_fire(cabin_world, seeded_dice)

        assert outcome.is_partial
        assert outcome.energy_cost == 2.0
        assert not cabin_world.fireplace.state.is_lit
        assert cabin_world.inventory.quantity(Item.KINDLING) == 0

    def test_bare_match_failure(self, resolver, cabin_world, seeded_dice):
        """Without kindling the chance is 60% and a miss is a plain failure."""
        cabin_world.fireplace.add_fuel(30.0)
        with patch.object(seeded_dice, "random", return_value=0.65):
            outcome = resolver.light_fire(cabin_world, seeded_dice)
        assert outcome.status == OutcomeStatus.FAILURE
        assert outcome.energy_cost == 2.0
        assert cabin_world.fireplace.fuel == 30.0

    def test_not_enough_fuel_rolls_nothing(self, resolver, cabin_world, seeded_dice):
        """Precondition failures never touch the dice."""
        seeded_dice.random = MagicMock(return_value=PASS)
        outcome = resolver.light_fire(cabin_world, seeded_dice)
        assert outcome.failed
        assert "fuel" in outcome.message
        seeded_dice.random.assert_not_called()

    def test_already_lit_and_no_matches(self, resolver, cabin_world, seeded_dice):
        """A lit fire and a missing matchbox both fail validation."""
        cabin_world.fireplace.add_fuel(30.0)
        cabin_world.fireplace.ignite()
        assert resolver.light_fire(cabin_world, seeded_dice).message == "The fire is already lit."

        cabin_world.fireplace.consume(100.0)
        cabin_world.fireplace.add_fuel(30.0)
        cabin_world.inventory.remove(Item.MATCHBOX)
        assert "matchbox" in resolver.light_fire(cabin_world, seeded_dice).message

    def test_chance_is_capped(self, resolver, cabin_world, seeded_dice):
        """A master fire-maker still tops out at 95%."""
        cabin_world.skills = SkillLedger(seed_level=100)
        check = resolver.skill_check(cabin_world, seeded_dice, Skill.FIRE_MAKING, 50.0, 15.0, cap=0.95)
        assert check.chance == 0.95


# =============================================================================
# STONE AND FORAGING
# =============================================================================


class TestStoneAndForage:
    """Tests for knapping and foraging."""

    def test_knap_success(self, resolver, fresh_world, seeded_dice):
        """Two stones become one stone and a sharp stone."""
        fresh_world.inventory.add(Item.STONE, 2)
        with patch.object(seeded_dice, "random", return_value=PASS):
            outcome = resolver.knap_stone(fresh_world, seeded_dice)
        assert outcome.succeeded
        assert fresh_world.inventory.quantity(Item.STONE) == 1
        assert fresh_world.inventory.quantity(Item.SHARP_STONE) == 1

    def test_knap_failure_uses_a_stone(self, resolver, fresh_world, seeded_dice):
        """A shattered stone is gone and the hand is grazed."""
        fresh_world.inventory.add(Item.STONE, 2)
        with patch.object(seeded_dice, "random", return_value=FAIL):
            outcome = resolver.knap_stone(fresh_world, seeded_dice)
        assert outcome.is_partial
        assert fresh_world.inventory.quantity(Item.STONE) == 1
        assert fresh_world.inventory.quantity(Item.SHARP_STONE) == 0
        assert fresh_world.vitals.health < 100.0

    def test_knap_needs_two_stones(self, resolver, fresh_world, seeded_dice):
        """One stone is not enough."""
        fresh_world.inventory.add(Item.STONE)
        assert resolver.knap_stone(fresh_world, seeded_dice).failed
        assert fresh_world.inventory.quantity(Item.STONE) == 1

    def test_forage_success_on_the_path(self, resolver, fresh_world, seeded_dice):
        """With every roll passing, the path yields the full drop set."""
        with patch.object(seeded_dice, "random", return_value=PASS):
            outcome = resolver.forage(fresh_world, seeded_dice)

        assert outcome.succeeded
        inventory = fresh_world.inventory
        assert inventory.quantity(Item.STICK) == 2
        assert inventory.quantity(Item.PLANT_FIBER) == 1
        assert inventory.quantity(Item.STONE) == 1
        assert inventory.quantity(Item.WILD_BERRY) == 3
        assert inventory.quantity(Item.WILD_HERBS) == 1
        assert inventory.quantity(Item.DATE) == 0
        assert outcome.details["found"]["wild_berry"] == 3

    def test_forage_depletes_node(self, resolver, fresh_world, seeded_dice):
        """An emptied node refuses further foraging until it regrows."""
        fresh_world.forage_nodes[START_POSITION] = ForageNode(charges=1)
        with patch.object(seeded_dice, "random", return_value=PASS):
            assert resolver.forage(fresh_world, seeded_dice).succeeded
            again = resolver.forage(fresh_world, seeded_dice)

        node = fresh_world.forage_nodes[START_POSITION]
        assert node.is_depleted
        assert node.cooldown == 12
        assert again.failed
        assert again.tick_cost == 0

    def test_forage_miss_costs_time(self, resolver, fresh_world, seeded_dice):
        """A failed search still takes a tick and some energy."""
        with patch.object(seeded_dice, "random", return_value=FAIL):
            outcome = resolver.forage(fresh_world, seeded_dice)
        assert outcome.failed
        assert outcome.tick_cost == 1
        assert outcome.energy_cost == 3.0

    def test_forage_preconditions(self, resolver, fresh_world, seeded_dice):
        """Indoors and exhaustion both block foraging."""
        fresh_world.location = Indoor(Room.CABIN_MAIN)
        assert resolver.forage(fresh_world, seeded_dice).failed

        fresh_world.location = Outdoors(START_POSITION)
        fresh_world.vitals = Vitals(energy=4.0)
        assert "exhausted" in resolver.forage(fresh_world, seeded_dice).message


# =============================================================================
# TREES
# =============================================================================


FOREST_TILE = Position(3, 2)
GROVE_TILE = Position(1, -2)


class TestTrees:
    """Tests for felling standing trees."""

    def test_needs_axe(self, resolver, fresh_world, seeded_dice):
        """Without an axe nothing is swung and no tree is grown."""
        fresh_world.location = Outdoors(FOREST_TILE)
        outcome = resolver.chop_tree(fresh_world, seeded_dice)
        assert outcome.failed
        assert "axe" in outcome.message
        assert FOREST_TILE not in fresh_world.trees

    def test_no_trees_on_path_or_desert(self, resolver, fresh_world, seeded_dice):
        """Trees only grow in the forests and the bamboo grove."""
        fresh_world.inventory.add(Item.AXE)
        assert "don't see a tree" in resolver.chop_tree(fresh_world, seeded_dice).message

        fresh_world.location = Outdoors(Position(3, -6))
        assert resolver.chop_tree(fresh_world, seeded_dice).failed
        assert fresh_world.trees == {}

    def test_strokes_fell_a_birch(self, resolver, fresh_world, seeded_dice):
        """Five good strokes fell a birch; the logs go in the pack."""
        fresh_world.location = Outdoors(FOREST_TILE)
        fresh_world.inventory.add(Item.AXE)
        fresh_world.trees[FOREST_TILE] = Tree(TreeKind.BIRCH)

        with patch.object(seeded_dice, "random", return_value=PASS):
            strokes = [resolver.chop_tree(fresh_world, seeded_dice) for _ in range(4)]
            assert all(outcome.succeeded for outcome in strokes)
            assert fresh_world.trees[FOREST_TILE].hits_done == 4
            assert "4/5" in strokes[-1].message
            final = resolver.chop_tree(fresh_world, seeded_dice)

        tree = fresh_world.trees[FOREST_TILE]
        assert final.succeeded
        assert final.details["felled"] == "birch"
        assert tree.felled
        assert tree.regrowth == 144
        assert 2 <= fresh_world.inventory.quantity(Item.LOG) <= 4
        assert 2 <= fresh_world.inventory.quantity(Item.BARK) <= 3
        assert final.details["hauled"] == 0
        assert fresh_world.skills.progress(Skill.WOODCUTTING).xp == 5

    def test_glancing_stroke(self, resolver, fresh_world, seeded_dice):
        """A failed stroke hurts and makes no progress."""
        fresh_world.location = Outdoors(FOREST_TILE)
        fresh_world.inventory.add(Item.STONE_AXE)
        fresh_world.trees[FOREST_TILE] = Tree(TreeKind.PINE)
        with patch.object(seeded_dice, "random", return_value=FAIL):
            outcome = resolver.chop_tree(fresh_world, seeded_dice)

        assert outcome.is_partial
        assert outcome.energy_cost == 6.0
        assert outcome.tick_cost == 1
        assert 97.0 <= fresh_world.vitals.health <= 99.0
        assert fresh_world.trees[FOREST_TILE].hits_done == 0
        assert "0/5" in outcome.message

    def test_surplus_logs_hauled_to_shed(self, resolver, fresh_world, seeded_dice):
        """Logs that don't fit are added to the shed pile."""
        fresh_world.location = Outdoors(FOREST_TILE)
        fresh_world.inventory = Inventory(max_weight=0.1)
        fresh_world.inventory.add(Item.STONE_AXE)
        fresh_world.trees[FOREST_TILE] = Tree(TreeKind.BIRCH, hits_done=4)
        with patch.object(seeded_dice, "random", return_value=PASS):
            outcome = resolver.chop_tree(fresh_world, seeded_dice)

        hauled = outcome.details["hauled"]
        assert 2 <= hauled <= 4
        assert fresh_world.wood_shed.logs == 8 + hauled
        assert fresh_world.inventory.quantity(Item.LOG) == 0
        assert "left behind" in outcome.message

    def test_bamboo_grove(self, resolver, fresh_world, seeded_dice):
        """The grove grows bamboo, which falls after three strokes."""
        fresh_world.location = Outdoors(GROVE_TILE)
        fresh_world.inventory.add(Item.AXE)
        with patch.object(seeded_dice, "random", return_value=PASS):
            outcomes = [resolver.chop_tree(fresh_world, seeded_dice) for _ in range(3)]

        assert fresh_world.trees[GROVE_TILE].kind == TreeKind.BAMBOO
        assert outcomes[-1].details["felled"] == "bamboo"
        assert 2 <= fresh_world.inventory.quantity(Item.BAMBOO) <= 4
        assert fresh_world.inventory.quantity(Item.LOG) == 0

    def test_stump_refuses(self, resolver, fresh_world, seeded_dice):
        """A felled tree can't be chopped again until it regrows."""
        fresh_world.location = Outdoors(FOREST_TILE)
        fresh_world.inventory.add(Item.AXE)
        fresh_world.trees[FOREST_TILE] = Tree(TreeKind.APPLE, hits_done=5, felled=True, regrowth=10)
        seeded_dice.random = MagicMock()

        outcome = resolver.chop_tree(fresh_world, seeded_dice)
        assert outcome.failed
        assert "stump" in outcome.message
        seeded_dice.random.assert_not_called()


# =============================================================================
# FISHING
# =============================================================================


class TestFishing:
    """Tests for casting a line and cooking the catch."""

    def test_catch_table_with_rod_at_midmorning(self, resolver, fresh_world):
        """Outside the feeding hours a rod uses its base table."""
        assert resolver.catch_weights(fresh_world, use_rod=True, stormy=False) == [
            (Catch.SMALL, 45), (Catch.BIG, 18), (Catch.TRASH, 12), (Catch.NOTHING, 25),
        ]

    def test_catch_table_at_dawn_in_a_storm(self, resolver, fresh_world):
        """Feeding hours and storms shift a hand line's table."""
        fresh_world.clock = Clock(hour=6)
        assert resolver.catch_weights(fresh_world, use_rod=False, stormy=True) == [
            (Catch.SMALL, 26), (Catch.BIG, 7), (Catch.TRASH, 26), (Catch.NOTHING, 47),
        ]

    def test_skill_shifts_table(self, resolver, fresh_world):
        """Survival and observation move weight from empty casts to small fish."""
        fresh_world.skills = SkillLedger.from_dict({"survival": {"level": 24}, "observation": {"level": 40}})
        weights = dict(resolver.catch_weights(fresh_world, use_rod=True, stormy=False))
        assert weights[Catch.SMALL] == 49
        assert weights[Catch.NOTHING] == 21

    def test_small_catch_with_rod(self, resolver, fresh_world, seeded_dice):
        """A carried rod is used by default and trains survival and observation."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        fresh_world.inventory.add(Item.FISHING_ROD)
        with patch.object(seeded_dice, "weighted_choice", return_value=Catch.SMALL):
            outcome = resolver.fish(fresh_world, seeded_dice)

        assert outcome.succeeded
        assert outcome.details["catch"] == "small"
        assert outcome.tick_cost == 2
        assert outcome.energy_cost == 5.0
        assert fresh_world.inventory.quantity(Item.SMALL_FISH) == 1
        assert fresh_world.skills.progress(Skill.SURVIVAL).xp == 2
        assert fresh_world.skills.progress(Skill.OBSERVATION).xp == 1

    def test_big_catch_by_hand(self, resolver, fresh_world, seeded_dice):
        """A hefty fish takes an extra tick and more effort."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        with patch.object(seeded_dice, "weighted_choice", return_value=Catch.BIG):
            outcome = resolver.fish(fresh_world, seeded_dice)

        assert outcome.succeeded
        assert outcome.tick_cost == 2
        assert outcome.energy_cost == 5.0
        assert fresh_world.inventory.quantity(Item.BIG_FISH) == 1

    def test_driftwood(self, resolver, fresh_world, seeded_dice):
        """Trash on the line is a piece of driftwood."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        with patch.object(seeded_dice, "weighted_choice", return_value=Catch.TRASH):
            outcome = resolver.fish(fresh_world, seeded_dice)
        assert outcome.succeeded
        assert fresh_world.inventory.quantity(Item.DRIFTWOOD) == 1
        assert fresh_world.skills.progress(Skill.SURVIVAL).xp == 1

    def test_nothing_bites(self, resolver, fresh_world, seeded_dice):
        """An empty cast still costs time and energy and teaches a little."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        with patch.object(seeded_dice, "weighted_choice", return_value=Catch.NOTHING):
            outcome = resolver.fish(fresh_world, seeded_dice)

        assert outcome.failed
        assert "nothing bites" in outcome.message
        assert outcome.tick_cost == 1
        assert outcome.energy_cost == 4.0
        assert fresh_world.skills.progress(Skill.SURVIVAL).xp == 1

    def test_storm_makes_it_harder(self, resolver, fresh_world, seeded_dice):
        """Severe weather adds a tick and two energy."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        fresh_world.weather = WeatherField(
            north=WeatherCondition.HEAVY_RAIN,
            south=WeatherCondition.HEAVY_RAIN,
            east=WeatherCondition.HEAVY_RAIN,
            west=WeatherCondition.HEAVY_RAIN,
        )
        with patch.object(seeded_dice, "weighted_choice", return_value=Catch.SMALL):
            outcome = resolver.fish(fresh_world, seeded_dice)
        assert outcome.tick_cost == 2
        assert outcome.energy_cost == 6.0

    def test_full_pack_lets_the_fish_go(self, resolver, fresh_world, seeded_dice):
        """A catch that won't fit is released."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        fresh_world.inventory = Inventory(max_weight=0.1)
        fresh_world.inventory.add(Item.FISHING_ROD)
        with patch.object(seeded_dice, "weighted_choice", return_value=Catch.SMALL):
            outcome = resolver.fish(fresh_world, seeded_dice)
        assert outcome.failed
        assert outcome.tick_cost == 2
        assert fresh_world.inventory.quantity(Item.SMALL_FISH) == 0

    def test_preconditions(self, resolver, fresh_world, seeded_dice):
        """Shore, rod and energy are all checked before casting."""
        seeded_dice.weighted_choice = MagicMock()
        assert "shore" in resolver.fish(fresh_world, seeded_dice).message

        fresh_world.location = Outdoors(CABIN_POSITION)
        assert "fishing rod" in resolver.fish(fresh_world, seeded_dice, gear="rod").message

        fresh_world.vitals = Vitals(energy=4.0)
        assert "exhausted" in resolver.fish(fresh_world, seeded_dice).message

        fresh_world.location = Indoor(Room.CABIN_MAIN)
        assert resolver.fish(fresh_world, seeded_dice).failed
        seeded_dice.weighted_choice.assert_not_called()

    def test_cook_big_fish(self, resolver, cabin_world, seeded_dice):
        """A big fish grills into two portions over a lit fire."""
        cabin_world.inventory.add(Item.BIG_FISH)
        assert "lit fireplace" in resolver.cook_fish(cabin_world, seeded_dice, Item.BIG_FISH).message

        cabin_world.fireplace.add_fuel(30.0)
        cabin_world.fireplace.ignite()
        outcome = resolver.cook_fish(cabin_world, seeded_dice, Item.BIG_FISH)
        assert outcome.succeeded
        assert outcome.tick_cost == 3
        assert outcome.energy_cost == 4.0
        assert cabin_world.inventory.quantity(Item.COOKED_FISH) == 2
        assert cabin_world.inventory.quantity(Item.BIG_FISH) == 0

    def test_cook_rejects(self, resolver, cabin_world, seeded_dice):
        """Only raw fish can be grilled, and only when carried."""
        cabin_world.fireplace.add_fuel(30.0)
        cabin_world.fireplace.ignite()
        assert resolver.cook_fish(cabin_world, seeded_dice, Item.APPLE).failed
        assert "don't have a fish" in resolver.cook_fish(cabin_world, seeded_dice).message
        assert cabin_world.inventory.quantity(Item.APPLE) == 2

    def test_eat_fish(self, resolver, fresh_world, seeded_dice):
        """Raw fish fills but sits badly; cooked fish lifts the mood."""
        fresh_world.vitals = Vitals(fullness=20.0, mood=50.0)
        fresh_world.inventory.add(Item.SMALL_FISH)
        fresh_world.inventory.add(Item.COOKED_FISH)

        assert resolver.consume(fresh_world, seeded_dice, Item.SMALL_FISH).succeeded
        assert fresh_world.vitals.fullness == 34.0
        assert fresh_world.vitals.health == 99.0
        assert fresh_world.vitals.mood == 48.0

        assert resolver.consume(fresh_world, seeded_dice, Item.COOKED_FISH).succeeded
        assert fresh_world.vitals.fullness == 64.0
        assert fresh_world.vitals.mood == 52.0


# =============================================================================
# BLUEPRINTS
# =============================================================================


class TestCrafting:
    """Tests for blueprint projects."""

    @pytest.fixture
    def knife_world(self, fresh_world):
        fresh_world.inventory.add(Item.SHARP_STONE)
        fresh_world.inventory.add(Item.STICK)
        fresh_world.inventory.add(Item.PLANT_FIBER)
        return fresh_world

    def test_start_project(self, resolver, knife_world, seeded_dice):
        """Only one craftable project may be active."""
        assert resolver.start_project(knife_world, seeded_dice, Item.APPLE).failed
        assert resolver.start_project(knife_world, seeded_dice, Item.STONE_KNIFE).succeeded
        assert resolver.start_project(knife_world, seeded_dice, Item.CORDAGE).failed
        assert knife_world.active_project.target_item == Item.STONE_KNIFE

    def test_craft_stone_knife(self, resolver, knife_world, seeded_dice):
        """The completing addition assembles the knife and awards XP."""
        resolver.start_project(knife_world, seeded_dice, Item.STONE_KNIFE)
        first = resolver.add_material(knife_world, seeded_dice, Item.SHARP_STONE)
        assert first.tick_cost == 1
        assert first.energy_cost == 2.0
        resolver.add_material(knife_world, seeded_dice, Item.STICK)
        outcome = resolver.add_material(knife_world, seeded_dice, Item.PLANT_FIBER)

        assert outcome.succeeded
        assert outcome.tick_cost == 3
        assert outcome.energy_cost == 6.0
        assert knife_world.inventory.quantity(Item.STONE_KNIFE) == 1
        assert knife_world.active_project is None
        assert knife_world.skills.progress(Skill.STONEMASONRY).xp == 10

    def test_assembly_never_fails(self, resolver, fresh_world, seeded_dice):
        """Completing a blueprint always yields the item, however unlucky the dice."""
        fresh_world.inventory.add(Item.PLANT_FIBER, 3)
        resolver.start_project(fresh_world, seeded_dice, Item.CORDAGE)
        with patch.object(seeded_dice, "random", return_value=FAIL):
            outcomes = [resolver.add_material(fresh_world, seeded_dice, Item.PLANT_FIBER) for _ in range(3)]

        assert all(outcome.succeeded for outcome in outcomes)
        assert outcomes[-1].details["crafted"] == "cordage"
        assert fresh_world.inventory.quantity(Item.CORDAGE) == 1
        assert fresh_world.inventory.quantity(Item.PLANT_FIBER) == 0
        assert fresh_world.active_project is None
        assert fresh_world.skills.progress(Skill.TAILORING).xp == 5

    def test_assembly_draws_no_randomness(self, resolver, knife_world, seeded_dice):
        """Adding the final piece makes no random draw at all."""
        resolver.start_project(knife_world, seeded_dice, Item.STONE_KNIFE)
        resolver.add_material(knife_world, seeded_dice, Item.SHARP_STONE)
        resolver.add_material(knife_world, seeded_dice, Item.STICK)
        with patch.object(seeded_dice, "random", MagicMock()) as draw:
            assert resolver.add_material(knife_world, seeded_dice, Item.PLANT_FIBER).succeeded
        draw.assert_not_called()

    def test_add_material_rejections(self, resolver, knife_world, seeded_dice):
        """No project, missing items and unneeded items are all refused."""
        assert resolver.add_material(knife_world, seeded_dice, Item.STICK).failed
        resolver.start_project(knife_world, seeded_dice, Item.STONE_KNIFE)
        assert resolver.add_material(knife_world, seeded_dice, Item.CORDAGE).failed
        assert resolver.add_material(knife_world, seeded_dice, Item.APPLE).failed
        assert knife_world.inventory.quantity(Item.APPLE) == 2

    def test_abandon_returns_materials(self, resolver, knife_world, seeded_dice):
        """Abandoning gives added materials back."""
        assert resolver.abandon_project(knife_world, seeded_dice).failed
        resolver.start_project(knife_world, seeded_dice, Item.STONE_KNIFE)
        resolver.add_material(knife_world, seeded_dice, Item.STICK)

        outcome = resolver.abandon_project(knife_world, seeded_dice)
        assert "recover 1 material." in outcome.message
        assert knife_world.inventory.quantity(Item.STICK) == 1
        assert knife_world.active_project is None


# =============================================================================
# WATER, TEA AND FOOD
# =============================================================================


class TestProvisions:
    """Tests for water, tea and eating."""

    def test_fetch_water_by_the_lake(self, resolver, fresh_world, seeded_dice):
        """The empty kettle is swapped for a full one."""
        fresh_world.location = Outdoors(CABIN_POSITION)
        assert resolver.fetch_water(fresh_world, seeded_dice).succeeded
        assert fresh_world.inventory.quantity(Item.KETTLE) == 0
        assert fresh_world.inventory.quantity(Item.WATER_KETTLE) == 1

    def test_fetch_water_far_from_lake(self, resolver, fresh_world, seeded_dice):
        """The start of the path is nowhere near water."""
        assert resolver.fetch_water(fresh_world, seeded_dice).failed

    def test_boil_water(self, resolver, cabin_world, seeded_dice):
        """Boiling needs a lit fire and returns the empty kettle."""
        cabin_world.inventory.remove(Item.KETTLE)
        cabin_world.inventory.add(Item.WATER_KETTLE)
        assert resolver.boil_water(cabin_world, seeded_dice).failed

        cabin_world.fireplace.add_fuel(30.0)
        cabin_world.fireplace.ignite()
        assert resolver.boil_water(cabin_world, seeded_dice).succeeded
        assert cabin_world.inventory.quantity(Item.CLEAN_WATER) == 1
        assert cabin_world.inventory.quantity(Item.KETTLE) == 1
        assert cabin_world.inventory.quantity(Item.WATER_KETTLE) == 0

    def test_brew_and_drink_tea(self, resolver, fresh_world, seeded_dice):
        """Tea uses the cup, which comes back once the tea is drunk."""
        fresh_world.inventory.add(Item.CLEAN_WATER)
        fresh_world.inventory.add(Item.WILD_HERBS)
        assert resolver.brew_tea(fresh_world, seeded_dice).succeeded
        assert fresh_world.inventory.quantity(Item.TEA_CUP) == 0

        fresh_world.vitals = Vitals(hydration=50.0, mood=50.0)
        assert resolver.consume(fresh_world, seeded_dice, Item.HERBAL_TEA).succeeded
        assert fresh_world.vitals.hydration == 65.0
        assert fresh_world.vitals.mood == 55.0
        assert fresh_world.inventory.quantity(Item.TEA_CUP) == 1

    def test_brew_tea_missing_herbs(self, resolver, fresh_world, seeded_dice):
        """Missing ingredients fail before anything is used."""
        fresh_world.inventory.add(Item.CLEAN_WATER)
        assert resolver.brew_tea(fresh_world, seeded_dice).failed
        assert fresh_world.inventory.quantity(Item.CLEAN_WATER) == 1

    def test_consume(self, resolver, fresh_world, seeded_dice):
        """Eating applies the food's effect and takes a tick."""
        fresh_world.vitals = Vitals(fullness=50.0)
        outcome = resolver.consume(fresh_world, seeded_dice, Item.APPLE)
        assert outcome.tick_cost == 1
        assert fresh_world.vitals.fullness == 65.0
        assert fresh_world.inventory.quantity(Item.APPLE) == 1

        assert resolver.consume(fresh_world, seeded_dice, Item.MATCHBOX).failed
        assert resolver.consume(fresh_world, seeded_dice, Item.DATE).failed


# =============================================================================
# REST
# =============================================================================


class TestRest:
    """Tests for sleep and wait."""

    def test_sleep_well_fed(self, resolver, fresh_world, seeded_dice):
        """Fed and watered sleep heals 15."""
        fresh_world.vitals = Vitals(health=70.0, energy=50.0)
        outcome = resolver.sleep(fresh_world, seeded_dice)
        assert outcome.tick_cost == 6
        assert fresh_world.vitals.energy == 75.0
        assert fresh_world.vitals.health == 85.0
        assert fresh_world.vitals.fullness == 75.0

    def test_sleep_hungry(self, resolver, fresh_world, seeded_dice):
        """Hungry sleep heals only 5."""
        fresh_world.vitals = Vitals(health=70.0, fullness=30.0)
        resolver.sleep(fresh_world, seeded_dice)
        assert fresh_world.vitals.health == 75.0

    @pytest.mark.parametrize("duration,ticks", [("short", 1), ("medium", 3), ("LONG", 6)])
    def test_wait(self, resolver, fresh_world, seeded_dice, duration, ticks):
        """Each wait duration maps to a tick count."""
        assert resolver.wait(fresh_world, seeded_dice, duration).tick_cost == ticks

    def test_wait_unknown_duration(self, resolver, fresh_world, seeded_dice):
        """Unknown durations fail without time passing."""
        outcome = resolver.wait(fresh_world, seeded_dice, "forever")
        assert outcome.failed
        assert outcome.tick_cost == 0


class TestFirstFailure:
    """Tests for the precondition combinator."""

    def test_short_circuits(self):
        """Later checks are not evaluated after a failure."""
        later = MagicMock(return_value="never")
        assert first_failure(lambda: None, lambda: "first", later) == "first"
        later.assert_not_called()

    def test_all_pass(self):
        """No failures yields None."""
        assert first_failure(lambda: None, lambda: None) is None
        assert first_failure() is None
