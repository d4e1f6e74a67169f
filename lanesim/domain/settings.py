"""Immutable simulation settings.

Defaults come from :mod:`lanesim.domain.config`; a kernel builds one
``SimulationSettings`` at start-up and hands the same instance to every system.
"""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from lanesim.domain import config
from lanesim.domain.models import Vec2


class SimulationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    tick_duration: float = config.TICK_DURATION
    max_agents: int = config.MAX_AGENTS

    left_wall: float = config.LEFT_WALL
    right_wall: float = config.RIGHT_WALL
    bottom_wall: float = config.BOTTOM_WALL
    top_wall: float = config.TOP_WALL
    wall_thickness: float = config.WALL_THICKNESS

    num_lanes: int = config.NUM_LANES
    lane_width: float = config.LANE_WIDTH

    car_width: float = config.CAR_WIDTH
    car_length: float = config.CAR_LENGTH

    gas_power: float = config.CAR_GAS_POWER
    brake_power: float = config.CAR_BRAKE_POWER
    sight_distance: float = config.CAR_SIGHT_DISTANCE
    lateral_speed: float = config.CAR_LATERAL_SPEED
    initial_speed_pct: float = config.INITIAL_SPEED_PCT

    friction_decay: float = config.FRICTION_DECAY
    speed_limit: float = config.SPEED_LIMIT

    lane_center_epsilon: float = config.LANE_CENTER_EPSILON
    approach_speed_guard: float = config.APPROACH_SPEED_GUARD
    min_headroom_denominator: float = config.MIN_HEADROOM_DENOMINATOR
    lane_check_lane_widths: float = config.LANE_CHECK_LANE_WIDTHS

    @field_validator(
        "tick_duration", "lane_width", "car_width", "car_length", "sight_distance",
        "speed_limit", "lateral_speed", "lane_center_epsilon", "min_headroom_denominator",
    )
    @classmethod
    def _must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be > 0")
        return value

    @field_validator("gas_power", "brake_power", "approach_speed_guard", "initial_speed_pct")
    @classmethod
    def _must_be_non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("friction_decay")
    @classmethod
    def _friction_in_unit_interval(cls, value: float) -> float:
        if not 0.0 < value < 1.0:
            raise ValueError("friction_decay must be in (0.0, 1.0)")
        return value

    @field_validator("num_lanes", "max_agents")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be >= 1")
        return value

    @model_validator(mode="after")
    def _lanes_fit_arena(self) -> "SimulationSettings":
        if self.right_wall <= self.left_wall or self.top_wall <= self.bottom_wall:
            raise ValueError("arena must have positive width and height")
        if self.num_lanes * self.lane_width > self.right_wall - self.left_wall:
            raise ValueError("lanes do not fit between left_wall and right_wall")
        return self

    @property
    def car_size(self) -> Vec2:
        return Vec2(x=self.car_width, y=self.car_length)

    @property
    def home_lane_index(self) -> int:
        return self.num_lanes - 1
