from typing import List
from lanesim.domain.models import Agent
from lanesim.domain.settings import SimulationSettings

class MotionSystem:
    def __init__(self, settings: SimulationSettings):
        self.settings = settings

    def update(self, agents: List[Agent], dt: float):
        self.apply_friction(agents)
        self.apply_velocity(agents, dt)
        self.wrap_position(agents)

    def apply_friction(self, agents: List[Agent]):
        decay = self.settings.friction_decay
        for agent in agents:
            if not agent.subject_to_friction:
                continue
            agent.velocity.x *= decay
            agent.velocity.y *= decay

    def apply_velocity(self, agents: List[Agent], dt: float):
        for agent in agents:
            agent.position.x += agent.velocity.x * dt
            agent.position.y += agent.velocity.y * dt

    def wrap_position(self, agents: List[Agent]):
        # Closed loop: leaving through the top re-enters at the bottom
        for agent in agents:
            half_length = agent.size.y / 2.0
            if agent.position.y > self.settings.top_wall - half_length:
                agent.position.y = self.settings.bottom_wall + half_length
