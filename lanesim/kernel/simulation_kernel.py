import logging
import random
from collections import deque
from typing import Any, Deque, Dict, Optional

from lanesim.arbitration.lane_change_arbitrator import LaneChangeArbitrator
from lanesim.controllers.lateral import LateralController
from lanesim.controllers.longitudinal import LongitudinalController
from lanesim.domain.geometry import Aabb, agent_bounding_box, lane_index_from_screen_pos, lane_spawn_position
from lanesim.domain.lanes import LaneNetwork
from lanesim.domain.models import (
    Agent, AgentView, DriverProfile, Lawfulness, Patience, Temperament, Vec2, WorldState
)
from lanesim.domain.personality import PersonalityTables
from lanesim.domain.settings import SimulationSettings
from lanesim.domain.state import SimulationState
from lanesim.kernel.commands import Command
from lanesim.kernel.snapshot_builder import SnapshotBuilder
from lanesim.systems.motion_system import MotionSystem
from lanesim.systems.perception_system import PerceptionSystem

log = logging.getLogger(__name__)

class SimulationKernel:
    def __init__(self, settings: Optional[SimulationSettings] = None, personality: Optional[PersonalityTables] = None):
        self.settings = settings or SimulationSettings()
        self.personality = personality or PersonalityTables()
        self.state = SimulationState()
        self.dt = self.settings.tick_duration  # Fixed timestep
        self.command_queue: Deque[Command] = deque()
        self.initialized = False
        self.rng = random.Random()
        self._next_agent_number = 0

        # Pipeline stages, in tick order
        self.lanes = LaneNetwork.from_settings(self.settings)
        self.perception = PerceptionSystem(self.settings)
        self.longitudinal = LongitudinalController(self.settings, self.personality)
        self.arbitrator = LaneChangeArbitrator(self.settings, self.personality, self.lanes)
        self.lateral = LateralController(self.settings, self.lanes)
        self.motion = MotionSystem(self.settings)

        self.snapshot_builder = SnapshotBuilder(self.longitudinal)

    def initialize(self, seed: int = 42, populate: bool = True):
        self.state = SimulationState()
        self.command_queue.clear()
        self._next_agent_number = 0
        self.rng.seed(seed)
        if populate:
            self._initialize_agents()
        self.initialized = True
        log.info("Simulation Kernel Initialized with Seed %d (%d agents)", seed, len(self.state.agents))

    def _initialize_agents(self):
        # Default scene: one passive, orderly driver at the start of every lane
        for lane_index in range(self.settings.num_lanes):
            self.spawn_agent(lane_index, Lawfulness.ORDERLY, Temperament.PASSIVE, Patience.NORMAL)

    def spawn_agent(
        self,
        lane_index: int,
        lawfulness: Lawfulness,
        temperament: Temperament,
        patience: Patience,
        position_y: Optional[float] = None,
    ) -> Optional[Agent]:
        if len(self.state.agents) >= self.settings.max_agents:
            log.warning("Spawn in lane %d refused: %d agents already", lane_index, len(self.state.agents))
            return None

        position = lane_spawn_position(lane_index, self.settings)
        if position_y is not None:
            position.y = position_y
        position = self._free_spawn_position(position)
        if position is None:
            log.warning("Spawn in lane %d refused: no free slot ahead of the spawn point", lane_index)
            return None
        agent = Agent(
            id=f"car-{self._next_agent_number}",
            position=position,
            velocity=Vec2(x=0.0, y=self.settings.speed_limit * self.settings.initial_speed_pct),
            size=self.settings.car_size,
            lane_index=self.lanes.validate(lane_index_from_screen_pos(position, self.settings)),
            driver_profile=DriverProfile(lawfulness=lawfulness, temperament=temperament, patience=patience),
        )
        self._next_agent_number += 1
        self.state.agents.append(agent)
        log.debug("Spawned %s in lane %d at %s", agent.id, agent.lane_index, position)
        return agent

    def _free_spawn_position(self, position: Vec2) -> Optional[Vec2]:
        # Slide forward past any car overlapping the spawn box, one car length of gap
        half_size = Vec2(x=self.settings.car_width / 2.0, y=self.settings.car_length / 2.0)
        top = self.settings.top_wall - half_size.y
        while True:
            spawn_box = Aabb.from_center(position, half_size)
            blockers = [agent for agent in self.state.agents if spawn_box.intersects(agent_bounding_box(agent))]
            if not blockers:
                return position
            position.y = max(agent.position.y for agent in blockers) + 2.0 * self.settings.car_length
            if position.y > top:
                return None

    def spawn_random_agent(self) -> Optional[Agent]:
        half_length = self.settings.car_length / 2.0
        return self.spawn_agent(
            self.rng.randrange(self.settings.num_lanes),
            self.rng.choice(list(Lawfulness)),
            self.rng.choice(list(Temperament)),
            self.rng.choice(list(Patience)),
            position_y=self.rng.uniform(self.settings.bottom_wall + half_length, self.settings.top_wall - half_length),
        )

    def modify_agent(self, agent_id: str, driver_profile: DriverProfile) -> Optional[Agent]:
        agent = self.state.find_agent(agent_id)
        if not agent:
            log.warning("Cannot modify unknown agent %s", agent_id)
            return None
        # Replaced wholesale, never merged field by field
        agent.driver_profile = DriverProfile.model_validate(driver_profile)
        return agent

    def remove_agent(self, agent_id: str) -> Optional[Agent]:
        agent = self.state.find_agent(agent_id)
        if not agent:
            log.warning("Cannot remove unknown agent %s", agent_id)
            return None
        self.state.agents.remove(agent)
        return agent

    def queue_command(self, command: Command):
        self.command_queue.append(command)

    def run_tick(self):
        if not self.initialized:
            self.initialize()

        self._consume_commands()
        if self.state.paused:
            return
        self._advance()

    def step(self):
        """Run exactly one tick, even while paused."""
        if not self.initialized:
            self.initialize()

        self._consume_commands()
        self._advance()

    def _consume_commands(self):
        while self.command_queue:
            cmd = self.command_queue.popleft()
            cmd.execute(self)

    def _advance(self):
        agents = self.state.agents
        dt = self.dt

        # Each stage finishes with every agent before the next one starts
        self.perception.update(agents, dt)
        self.longitudinal.run_tick(agents, dt)
        self.arbitrator.run_tick(agents, dt)
        self.lateral.run_tick(agents, dt)
        self.motion.update(agents, dt)

        self.state.time += dt
        self.state.tick_id += 1

    def get_state(self) -> WorldState:
        return WorldState(
            tick=self.state.tick_id,
            time=self.state.time,
            paused=self.state.paused,
            agents=[AgentView.of(agent) for agent in self.state.agents],
        )

    def get_agent(self, agent_id: str) -> Optional[AgentView]:
        agent = self.state.find_agent(agent_id)
        if not agent:
            return None
        return AgentView.of(agent)

    def get_snapshot(self) -> Dict[str, Any]:
        return self.snapshot_builder.build(self.state)
