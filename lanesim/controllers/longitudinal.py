import logging
from typing import List

from lanesim.controllers.base import Controller
from lanesim.domain.models import Agent
from lanesim.domain.personality import PersonalityTables
from lanesim.domain.settings import SimulationSettings

log = logging.getLogger(__name__)

class LongitudinalController(Controller):
    """Gas and brake along the road, driven by the distance to the car ahead.

    Agents accelerate freely until an obstacle is inside their brake
    threshold. Inside their tail distance they always brake, harder the
    closer they are. In between, the change in distance since last tick
    approximates the relative speed of the car ahead: unless it is closing
    fast the agent keeps accelerating, scaled by how much room is left
    before the tail distance.
    """

    def __init__(self, settings: SimulationSettings, personality: PersonalityTables):
        self.settings = settings
        self.personality = personality

    def run_tick(self, agents: List[Agent], dt: float):
        for agent in agents:
            delta = self.velocity_delta(agent, dt)
            agent.velocity.y = max(agent.velocity.y + delta, 0.0)

    def top_speed(self, agent: Agent) -> float:
        return self.settings.speed_limit * self.personality.top_speed_pct(agent.driver_profile.temperament)

    def brake_distance_threshold(self, agent: Agent) -> float:
        return self.settings.sight_distance * self.personality.brake_threshold_pct(agent.driver_profile.temperament)

    def tail_distance(self, agent: Agent) -> float:
        return self.settings.car_length * self.personality.tail_threshold_pct(agent.driver_profile.temperament)

    def velocity_delta(self, agent: Agent, dt: float) -> float:
        s = self.settings
        distance = agent.perception.front_distance
        brake_threshold = self.brake_distance_threshold(agent)

        if not agent.perception.has_obstacle or distance > brake_threshold:
            return self._gas(agent, s.gas_power)

        tail_distance = self.tail_distance(agent)

        # Always brake within tail distance
        if distance <= tail_distance:
            brake_power = s.brake_power * (1.0 - distance / tail_distance)
            log.debug(
                "BRAKE_MIN agent=%s distance=%.2f tail_distance=%.2f brake_power=%.2f",
                agent.id, distance, tail_distance, brake_power,
            )
            return -brake_power

        # Between tail distance and brake threshold; negative relative speed means closing in
        relative_speed = (distance - agent.perception.last_front_distance) / dt
        adjusted_threshold = max(brake_threshold - tail_distance, s.min_headroom_denominator)
        headroom = min(max((distance - tail_distance) / adjusted_threshold, 0.0), 1.0)

        if relative_speed > -s.approach_speed_guard:
            gas_power = s.gas_power * headroom
            log.debug(
                "ACCEL_REL agent=%s distance=%.2f relative_speed=%.2f headroom=%.2f gas_power=%.2f",
                agent.id, distance, relative_speed, headroom, gas_power,
            )
            return self._gas(agent, gas_power)

        brake_power = s.brake_power * (1.0 - headroom)
        log.debug(
            "BRAKE_REL agent=%s distance=%.2f relative_speed=%.2f headroom=%.2f brake_power=%.2f",
            agent.id, distance, relative_speed, headroom, brake_power,
        )
        return -brake_power

    def _gas(self, agent: Agent, power: float) -> float:
        # Never gas past top speed; friction brings an over-speed car back down
        headroom = self.top_speed(agent) - agent.velocity.y
        if headroom <= 0.0:
            return 0.0
        return min(power, headroom)
