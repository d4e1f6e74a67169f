from typing import List, Optional
from pydantic import BaseModel
from lanesim.domain.models import Agent

class SimulationState(BaseModel):
    tick_id: int = 0
    time: float = 0.0
    agents: List[Agent] = []
    paused: bool = False
    debug_enabled: bool = False

    def find_agent(self, agent_id: str) -> Optional[Agent]:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None
