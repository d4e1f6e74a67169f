import logging
from typing import Dict, List, Optional

from lanesim.domain.geometry import Aabb, agent_bounding_box
from lanesim.domain.lanes import LaneNetwork
from lanesim.domain.models import ActiveLaneChange, Agent, LaneChangeDirection, Lawfulness, Vec2
from lanesim.domain.personality import PersonalityTables
from lanesim.domain.settings import SimulationSettings

log = logging.getLogger(__name__)

LaneOccupancy = Dict[int, List[Agent]]

class LaneChangeArbitrator:
    """Decides who wants to change lanes and commits those whose target lane is clear.

    Drivers want to change lanes in two situations:
      1) a car ahead holds them below the speed their patience tolerates: pass on the left
      2) they are orderly and not in the home lane: return to the right
    """

    def __init__(self, settings: SimulationSettings, personality: PersonalityTables, lanes: LaneNetwork):
        self.settings = settings
        self.personality = personality
        self.lanes = lanes

    def run_tick(self, agents: List[Agent], dt: float):
        # Built once per tick and never updated mid-tick
        occupancy = self.build_lane_occupancy(agents)

        for agent in agents:
            if agent.active_lane_change is not None:
                continue

            direction = self.desired_direction(agent)
            if direction is None:
                continue

            target_lane = self.lanes.neighbor(agent.lane_index, direction)
            if target_lane is None:
                continue

            if self.is_lane_open(agent, target_lane, occupancy):
                agent.active_lane_change = ActiveLaneChange(direction=direction, target_lane_index=target_lane)
                log.debug("agent %s changing %s into lane %d", agent.id, direction.value, target_lane)
            else:
                log.debug("agent %s wants lane %d but it is not open", agent.id, target_lane)

    def build_lane_occupancy(self, agents: List[Agent]) -> LaneOccupancy:
        occupancy: LaneOccupancy = {}
        for agent in agents:
            if agent.lane_index not in occupancy:
                occupancy[agent.lane_index] = []
            occupancy[agent.lane_index].append(agent)
        return occupancy

    def desired_direction(self, agent: Agent) -> Optional[LaneChangeDirection]:
        # Only the wish; feasibility is checked separately
        profile = agent.driver_profile
        min_speed = self.personality.min_speed_to_pass_pct(profile.patience) * self.settings.speed_limit

        if agent.perception.has_obstacle and agent.velocity.y < min_speed:
            # Already in the passing lane: wait behind the slower car
            if self.lanes.neighbor(agent.lane_index, LaneChangeDirection.LEFT) is None:
                return None
            return LaneChangeDirection.LEFT

        if profile.lawfulness == Lawfulness.ORDERLY and agent.lane_index < self.settings.home_lane_index:
            return LaneChangeDirection.RIGHT

        return None

    def is_lane_open(self, agent: Agent, target_lane: int, occupancy: LaneOccupancy) -> bool:
        # The agent's own box, widened to reach across the neighbouring lanes
        side_reach = self.settings.lane_width * self.settings.lane_check_lane_widths
        check_box = Aabb.from_center(agent.position, Vec2(x=side_reach, y=agent.size.y / 2.0))

        for other in occupancy.get(target_lane, []):
            if other is agent:
                continue
            if check_box.intersects(agent_bounding_box(other)):
                return False
        return True
