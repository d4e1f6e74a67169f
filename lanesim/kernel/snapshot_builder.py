from typing import Any, Dict
from lanesim.controllers.longitudinal import LongitudinalController
from lanesim.domain.geometry import front_middle
from lanesim.domain.models import Agent
from lanesim.domain.state import SimulationState

class SnapshotBuilder:
    def __init__(self, longitudinal: LongitudinalController):
        # Sight overlay values come from the same formulas the controller brakes by
        self.longitudinal = longitudinal

    def build(self, state: SimulationState) -> Dict[str, Any]:
        return {
            "tick": state.tick_id,
            "time": state.time,
            "paused": state.paused,
            "agents": [self.build_agent(agent, state.debug_enabled) for agent in state.agents],
        }

    def build_agent(self, agent: Agent, debug: bool = False) -> Dict[str, Any]:
        lane_change = agent.active_lane_change
        snapshot = {
            "id": agent.id,
            "pos": (agent.position.x, agent.position.y),
            "vel": (agent.velocity.x, agent.velocity.y),
            "lane": agent.lane_index,
            "profile": agent.driver_profile.model_dump(mode="json"),
            "front_distance": agent.perception.front_distance,
            "last_front_distance": agent.perception.last_front_distance,
            "lane_change": lane_change.model_dump(mode="json") if lane_change else None,
        }
        if debug:
            settings = self.longitudinal.settings
            origin = front_middle(agent)
            snapshot["sight"] = {
                "origin": (origin.x, origin.y),
                "sight_distance": settings.sight_distance,
                "tail_distance": self.longitudinal.tail_distance(agent),
                "brake_threshold": self.longitudinal.brake_distance_threshold(agent),
                "obstacle_distance": agent.perception.front_distance,
            }
        return snapshot
