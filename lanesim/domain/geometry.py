"""Lane/screen conversions, axis-aligned boxes and ray casting.

Screen space has x growing to the right (across lanes) and y growing along
the road, which is the direction every agent drives in.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict

from lanesim.domain.errors import LaneIndexError
from lanesim.domain.models import Agent, Vec2
from lanesim.domain.settings import SimulationSettings

FORWARD = Vec2(x=0.0, y=1.0)


class Aabb(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: Vec2
    max: Vec2

    @classmethod
    def from_center(cls, center: Vec2, half_size: Vec2) -> "Aabb":
        return cls(
            min=Vec2(x=center.x - half_size.x, y=center.y - half_size.y),
            max=Vec2(x=center.x + half_size.x, y=center.y + half_size.y),
        )

    def intersects(self, other: "Aabb") -> bool:
        # Touching edges count as overlap
        x_overlaps = self.min.x <= other.max.x and self.max.x >= other.min.x
        y_overlaps = self.min.y <= other.max.y and self.max.y >= other.min.y
        return x_overlaps and y_overlaps


def agent_bounding_box(agent: Agent) -> Aabb:
    return Aabb.from_center(agent.position, Vec2(x=agent.size.x / 2.0, y=agent.size.y / 2.0))


def front_middle(agent: Agent) -> Vec2:
    return Vec2(x=agent.position.x, y=agent.position.y + agent.size.y / 2.0)


def ray_aabb_intersection(origin: Vec2, direction: Vec2, max_distance: float, box: Aabb) -> Optional[float]:
    """Distance along a unit-length ray to where it enters ``box``.

    Slab test. The entry distance is clamped at 0, so a ray starting inside
    the box hits at distance 0. Returns ``None`` when the box is missed,
    entirely behind the origin, or entered beyond ``max_distance``.
    """
    t_near = 0.0
    t_far = math.inf

    for o, d, lo, hi in (
        (origin.x, direction.x, box.min.x, box.max.x),
        (origin.y, direction.y, box.min.y, box.max.y),
    ):
        if d == 0.0:
            # Parallel to this slab: must already be between its planes
            if o < lo or o > hi:
                return None
            continue
        t1 = (lo - o) / d
        t2 = (hi - o) / d
        if t1 > t2:
            t1, t2 = t2, t1
        t_near = max(t_near, t1)
        t_far = min(t_far, t2)

    if t_near > t_far or t_near > max_distance:
        return None
    return t_near


def lane_index_to_screen_pos(lane_index: int, settings: SimulationSettings) -> Vec2:
    """Start of a lane: its left edge at the bottom wall."""
    if not 0 <= lane_index < settings.num_lanes:
        raise LaneIndexError(lane_index, settings.num_lanes)
    return Vec2(x=settings.left_wall + settings.lane_width * lane_index, y=settings.bottom_wall)


def lane_index_from_screen_pos(screen_pos: Vec2, settings: SimulationSettings) -> int:
    # May fall outside [0, num_lanes); callers validate
    return math.floor((screen_pos.x - settings.left_wall) / settings.lane_width)


def lane_index_to_center(lane_index: int, settings: SimulationSettings) -> Vec2:
    lane_pos = lane_index_to_screen_pos(lane_index, settings)
    return Vec2(x=lane_pos.x + settings.lane_width / 2.0, y=lane_pos.y)


def lane_spawn_position(lane_index: int, settings: SimulationSettings) -> Vec2:
    return Vec2(
        x=lane_index_to_center(lane_index, settings).x,
        y=settings.bottom_wall + settings.wall_thickness,
    )
