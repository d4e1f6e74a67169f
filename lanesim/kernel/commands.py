from abc import ABC, abstractmethod
from typing import Any
from lanesim.domain.models import DriverProfile, Lawfulness, Patience, Temperament

class Command(ABC):
    @abstractmethod
    def execute(self, kernel: Any):
        pass

class SpawnAgentCommand(Command):
    def __init__(self, lane_index: int, lawfulness: Lawfulness, temperament: Temperament, patience: Patience):
        self.lane_index = lane_index
        self.lawfulness = lawfulness
        self.temperament = temperament
        self.patience = patience

    def execute(self, kernel: Any):
        return kernel.spawn_agent(self.lane_index, self.lawfulness, self.temperament, self.patience)

class SpawnRandomAgentCommand(Command):
    def execute(self, kernel: Any):
        return kernel.spawn_random_agent()

class ModifyAgentCommand(Command):
    def __init__(self, agent_id: str, driver_profile: DriverProfile):
        self.agent_id = agent_id
        self.driver_profile = driver_profile

    def execute(self, kernel: Any):
        return kernel.modify_agent(self.agent_id, self.driver_profile)

class RemoveAgentCommand(Command):
    def __init__(self, agent_id: str):
        self.agent_id = agent_id

    def execute(self, kernel: Any):
        return kernel.remove_agent(self.agent_id)

class ManualThrottleCommand(Command):
    """Driver override: one tick of full gas, or of full brake."""

    def __init__(self, agent_id: str, brake: bool = False):
        self.agent_id = agent_id
        self.brake = brake

    def execute(self, kernel: Any):
        agent = kernel.state.find_agent(self.agent_id)
        if agent:
            if self.brake:
                agent.velocity.y = max(agent.velocity.y - kernel.settings.brake_power, 0.0)
            else:
                agent.velocity.y += kernel.settings.gas_power
        return agent

class SetPausedCommand(Command):
    def __init__(self, paused: bool):
        self.paused = paused

    def execute(self, kernel: Any):
        kernel.state.paused = self.paused

class TogglePauseCommand(Command):
    def execute(self, kernel: Any):
        kernel.state.paused = not kernel.state.paused

class SetDebugModeCommand(Command):
    def __init__(self, enabled: bool):
        self.enabled = enabled

    def execute(self, kernel: Any):
        kernel.state.debug_enabled = self.enabled
