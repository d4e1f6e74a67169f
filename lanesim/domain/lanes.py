import networkx as nx
from typing import Optional

from lanesim.domain.errors import LaneIndexError
from lanesim.domain.geometry import lane_index_to_center
from lanesim.domain.models import LaneChangeDirection
from lanesim.domain.settings import SimulationSettings

class LaneNetwork:
    def __init__(self, num_lanes: int):
        self.num_lanes = num_lanes
        self.graph = nx.DiGraph()

    @classmethod
    def from_settings(cls, settings: SimulationSettings) -> "LaneNetwork":
        network = cls(settings.num_lanes)
        for lane_index in range(settings.num_lanes):
            network.add_lane(lane_index, lane_index_to_center(lane_index, settings).x)
        for lane_index in range(settings.num_lanes - 1):
            network.connect(lane_index, lane_index + 1)
        return network

    def add_lane(self, lane_index: int, center_x: float):
        self.graph.add_node(lane_index, center_x=center_x)

    def connect(self, left: int, right: int):
        self.graph.add_edge(left, right, direction=LaneChangeDirection.RIGHT)
        self.graph.add_edge(right, left, direction=LaneChangeDirection.LEFT)

    def validate(self, lane_index: int) -> int:
        if lane_index not in self.graph:
            raise LaneIndexError(lane_index, self.num_lanes)
        return lane_index

    def center_x(self, lane_index: int) -> float:
        return self.graph.nodes[self.validate(lane_index)]["center_x"]

    def neighbor(self, lane_index: int, direction: LaneChangeDirection) -> Optional[int]:
        for _, target, data in self.graph.out_edges(self.validate(lane_index), data=True):
            if data["direction"] == direction:
                return target
        return None
