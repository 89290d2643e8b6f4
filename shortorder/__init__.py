"""Short Order restaurant package.

Public API:
    from shortorder import RestaurantSim, Autopilot, DayCycle, ServicePhase
"""
from shortorder.autopilot import Autopilot
from shortorder.entities import Customer, DayCycle, DayEndPhase, PhaseDurations, ServicePhase
from shortorder.simulation import RestaurantSim

__all__ = ["Autopilot", "Customer", "DayCycle", "DayEndPhase", "PhaseDurations", "RestaurantSim", "ServicePhase"]
