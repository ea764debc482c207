"""
Hearthside - Main Entry Point

A cabin-in-the-woods survival simulation core driven from the command line.
Each invocation loads (or creates) the saved world, optionally resolves one
action or lets some time pass, prints the result and saves the world again.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from hearthside.config import DEFAULT_SAVE_PATH, SimulationConfig
from hearthside.game_state.simulation import Simulation
from hearthside.game_state.session_manager import SessionManager
from hearthside.data_models import DiceRoller
from hearthside.observability.run_log import RunLog


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# ARGUMENTS
# =============================================================================


def parse_param(text: str) -> tuple[str, str]:
    """Parse one key=value action parameter."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"Expected key=value, got '{text}'")
    return key.strip(), value.strip()


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Hearthside - a cabin survival simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hearthside --status                                  # Show the current world
  hearthside --action move --param direction=north     # Walk one tile north
  hearthside --action add_fuel --param item=log        # Feed the fireplace
  hearthside --ticks 6                                 # Let an hour pass
  hearthside --new --seed 42                           # Start over, reproducibly
        """
    )

    parser.add_argument(
        "--save-file",
        type=Path,
        default=DEFAULT_SAVE_PATH,
        help=f"World save file (default: {DEFAULT_SAVE_PATH})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible runs",
    )
    parser.add_argument(
        "--new",
        action="store_true",
        help="Ignore any existing save and start a new world",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    action_group = parser.add_argument_group("Action Options")
    action_group.add_argument(
        "--action",
        type=str,
        default=None,
        help="Action id to perform (see --list-actions)",
    )
    action_group.add_argument(
        "--param",
        type=parse_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Action parameter; may be repeated",
    )
    action_group.add_argument(
        "--ticks",
        type=int,
        default=0,
        help="Let this many 10-minute ticks pass",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--status",
        action="store_true",
        help="Print the world status",
    )
    output_group.add_argument(
        "--list-actions",
        action="store_true",
        help="List available actions and exit",
    )
    output_group.add_argument(
        "--run-log",
        type=Path,
        default=None,
        help="Write the run log of this invocation to a JSON file",
    )

    args = parser.parse_args(argv)
    if args.ticks < 0:
        parser.error("--ticks cannot be negative")
    return args


def create_config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Create SimulationConfig from parsed arguments."""
    return SimulationConfig(
        save_path=args.save_file,
        seed=args.seed,
        verbose=args.verbose,
    )


# =============================================================================
# SESSION
# =============================================================================


def create_simulation(config: SimulationConfig, new_world: bool = False) -> Simulation:
    """Build a Simulation, optionally discarding the saved world."""
    if not new_world:
        return Simulation(config)

    run_log = RunLog(seed=config.seed)
    dice = DiceRoller(seed=config.seed, listener=run_log.record_dice)
    world = SessionManager(config).new_world(dice)
    return Simulation(config, world=world, dice=dice, run_log=run_log)


def format_status(status: dict[str, Any]) -> str:
    lines = [
        f"Time: {status['time']}" + (", too dark to see far" if status["dark"] else ""),
        f"Location: {status['location']}",
        f"Weather: {status['weather']} ({status['temperature']}C)",
        f"Fireplace: {status['fire']}",
        status["vitals"],
        status["inventory"],
    ]
    if status["project"]:
        lines.append(status["project"])
    lines.extend(status["wildlife"])
    return "\n".join(lines)


def list_actions(sim: Simulation) -> str:
    lines = []
    for spec in sim.registry.all():
        params = " ".join(f"{name}=<{schema.get('type', 'value')}>" for name, schema in spec.params_schema.items())
        lines.append(f"{spec.id:<16} {spec.label}" + (f"  [{params}]" if params else ""))
    return "\n".join(lines)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    config = create_config_from_args(args)
    sim = create_simulation(config, new_world=args.new)

    if args.list_actions:
        print(list_actions(sim))
        return 0

    if args.new:
        sim.save()

    exit_code = 0
    if args.action:
        report = sim.perform(args.action, dict(args.param))
        print(report.text)
        if report.outcome.failed:
            exit_code = 1

    if args.ticks:
        sim.tick(args.ticks)
        for message in sim.world.drain_messages():
            print(message)

    if args.status or not (args.action or args.ticks):
        print(format_status(sim.status()))

    if args.run_log:
        path = sim.export_run_log(args.run_log)
        logger.info(f"Run log written to: {path}")
        logger.debug(json.dumps(sim.run_log.get_summary()))

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
