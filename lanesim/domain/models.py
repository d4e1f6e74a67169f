from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

# Driver behavior axes:
# lawfulness: keeping to the home (rightmost) lane except to pass
# temperament: top speed, when braking starts, how closely they tail
# patience: how much slowdown is tolerated before attempting to pass

class Lawfulness(str, Enum):
    CHAOTIC = "chaotic"
    ORDERLY = "orderly"

class Temperament(str, Enum):
    PSYCHOTIC = "psychotic"
    AGGRESSIVE = "aggressive"
    CALM = "calm"
    PASSIVE = "passive"

class Patience(str, Enum):
    ENLIGHTENED = "enlightened"
    PATIENT = "patient"
    NORMAL = "normal"
    WILD = "wild"

class LaneChangeDirection(str, Enum):
    LEFT = "left"    # towards lane 0, the passing lane
    RIGHT = "right"  # towards the home lane

class Vec2(BaseModel):
    x: float = 0.0
    y: float = 0.0

class DriverProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    lawfulness: Lawfulness = Lawfulness.ORDERLY
    temperament: Temperament = Temperament.CALM
    patience: Patience = Patience.NORMAL

class Perception(BaseModel):
    front_distance: float = -1.0  # -1 if nothing in sight, else distance to closest car ahead
    last_front_distance: float = -1.0  # previous tick's front_distance

    @property
    def has_obstacle(self) -> bool:
        return self.front_distance > -1.0

class ActiveLaneChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: LaneChangeDirection
    target_lane_index: int

class Agent(BaseModel):
    id: str
    position: Vec2
    velocity: Vec2
    size: Vec2  # x = width, y = length
    lane_index: int
    driver_profile: DriverProfile
    perception: Perception = Field(default_factory=Perception)
    active_lane_change: Optional[ActiveLaneChange] = None
    subject_to_friction: bool = True

# Telemetry Models

class AgentView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    position: Vec2
    velocity: Vec2
    size: Vec2
    lane_index: int
    driver_profile: DriverProfile
    perception: Perception
    active_lane_change: Optional[ActiveLaneChange] = None

    @classmethod
    def of(cls, agent: Agent) -> "AgentView":
        return cls.model_validate(agent.model_dump(exclude={"subject_to_friction"}))

class WorldState(BaseModel):
    model_config = ConfigDict(frozen=True)

    tick: int
    time: float
    paused: bool
    agents: List[AgentView]
