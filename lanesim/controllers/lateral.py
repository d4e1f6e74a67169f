import logging
import math
from typing import List

from lanesim.controllers.base import Controller
from lanesim.domain.lanes import LaneNetwork
from lanesim.domain.models import Agent
from lanesim.domain.settings import SimulationSettings

log = logging.getLogger(__name__)

class LateralController(Controller):
    def __init__(self, settings: SimulationSettings, lanes: LaneNetwork):
        self.settings = settings
        self.lanes = lanes

    def run_tick(self, agents: List[Agent], dt: float):
        for agent in agents:
            lane_change = agent.active_lane_change
            if lane_change is None:
                continue

            offset = self.lanes.center_x(lane_change.target_lane_index) - agent.position.x

            if abs(offset) > self.settings.lane_center_epsilon:
                # Last step lands on the centerline instead of swinging past it
                speed = min(self.settings.lateral_speed, abs(offset) / dt)
                agent.velocity.x = math.copysign(speed, offset)
            else:
                agent.velocity.x = 0.0
                agent.lane_index = lane_change.target_lane_index
                agent.active_lane_change = None
                log.debug("agent %s arrived in lane %d", agent.id, agent.lane_index)
