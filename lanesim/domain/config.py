# Simulation Configuration

# Timing
TICK_DURATION = 1.0 / 64.0  # Seconds per fixed tick
MAX_AGENTS = 50

# Arena Bounds (x is lateral, y is along the road)
LEFT_WALL = -450.0
RIGHT_WALL = 450.0
BOTTOM_WALL = -600.0
TOP_WALL = 600.0
WALL_THICKNESS = 10.0

# Lanes
NUM_LANES = 2
LANE_WIDTH = 40.0

# Car Geometry
CAR_WIDTH = 20.0
CAR_LENGTH = 40.0

# Car Physics
CAR_GAS_POWER = 10.0     # velocity gained per tick at full gas
CAR_BRAKE_POWER = 15.0   # velocity lost per tick at full brake
CAR_SIGHT_DISTANCE = 300.0
CAR_LATERAL_SPEED = 10.0
INITIAL_SPEED_PCT = 0.5  # Fraction of SPEED_LIMIT given at spawn

# Environment
FRICTION_DECAY = 0.996
SPEED_LIMIT = 200.0

# Behavior Tuning
LANE_CENTER_EPSILON = 0.5      # Distance at which a lane change counts as done
APPROACH_SPEED_GUARD = 5.0 * CAR_GAS_POWER  # Closing speed beyond which agents stop accelerating
MIN_HEADROOM_DENOMINATOR = 1e-6
LANE_CHECK_LANE_WIDTHS = 2.0   # Lane widths to either side checked before a lane change
