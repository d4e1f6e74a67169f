import logging
from typing import List, Optional

from lanesim.domain.geometry import FORWARD, agent_bounding_box, front_middle, ray_aabb_intersection
from lanesim.domain.models import Agent
from lanesim.domain.settings import SimulationSettings

log = logging.getLogger(__name__)

class PerceptionSystem:
    def __init__(self, settings: SimulationSettings):
        self.settings = settings

    def update(self, agents: List[Agent], dt: float):
        # Every hit is found before anything is written, so all agents see the same tick
        hits = [self.closest_obstacle(agent, agents) for agent in agents]

        for agent, distance in zip(agents, hits):
            perception = agent.perception
            if distance is None:
                # History is not rotated here; it is re-seeded when an obstacle reappears
                perception.front_distance = -1.0
                continue

            perception.last_front_distance = perception.front_distance
            perception.front_distance = distance

            # Made contact: come to a full stop
            if distance <= 0.0:
                log.debug("agent %s in contact, stopping", agent.id)
                agent.velocity.x = 0.0
                agent.velocity.y = 0.0

    def closest_obstacle(self, agent: Agent, agents: List[Agent]) -> Optional[float]:
        origin = front_middle(agent)
        closest: Optional[float] = None
        for other in agents:
            if other is agent:
                continue
            distance = ray_aabb_intersection(
                origin, FORWARD, self.settings.sight_distance, agent_bounding_box(other)
            )
            if distance is not None and (closest is None or distance < closest):
                closest = distance
        return closest
