from abc import ABC, abstractmethod
from typing import List
from lanesim.domain.models import Agent

class Controller(ABC):
    @abstractmethod
    def run_tick(self, agents: List[Agent], dt: float):
        pass
