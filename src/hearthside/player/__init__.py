"""Player vitals."""

from hearthside.player.vitals import Vitals, comfort_target, environment_temperature

__all__ = ["Vitals", "comfort_target", "environment_temperature"]
