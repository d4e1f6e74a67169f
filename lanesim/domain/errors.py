class SimulationInvariantError(RuntimeError):
    """Raised when the simulation reaches a state that can only come from a programming error."""


class UnknownTraitError(SimulationInvariantError, KeyError):
    def __init__(self, table: str, trait):
        self.table = table
        self.trait = trait
        super().__init__(f"No {table} coefficient for trait {trait!r}")


class LaneIndexError(SimulationInvariantError, IndexError):
    def __init__(self, lane_index: int, num_lanes: int):
        self.lane_index = lane_index
        self.num_lanes = num_lanes
        super().__init__(f"Lane index {lane_index} outside [0, {num_lanes})")
