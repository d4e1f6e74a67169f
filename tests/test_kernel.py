import unittest
from pydantic import ValidationError
from lanesim.domain.errors import LaneIndexError
from lanesim.domain.models import DriverProfile, Lawfulness, Patience, Temperament
from lanesim.domain.settings import SimulationSettings
from lanesim.kernel.commands import (
    ManualThrottleCommand, ModifyAgentCommand, RemoveAgentCommand, SetDebugModeCommand,
    SetPausedCommand, SpawnAgentCommand, SpawnRandomAgentCommand, TogglePauseCommand
)
from lanesim.kernel.simulation_kernel import SimulationKernel

class TestSpawning(unittest.TestCase):
    def setUp(self):
        self.kernel = SimulationKernel()
        self.kernel.initialize(seed=42, populate=False)

    def test_default_scene_has_one_driver_per_lane(self):
        kernel = SimulationKernel()
        kernel.initialize(seed=42)

        agents = kernel.state.agents
        self.assertEqual([agent.lane_index for agent in agents], [0, 1])
        for agent in agents:
            self.assertEqual(agent.driver_profile.lawfulness, Lawfulness.ORDERLY)
            self.assertEqual(agent.driver_profile.temperament, Temperament.PASSIVE)
            self.assertEqual(agent.driver_profile.patience, Patience.NORMAL)

    def test_spawned_agent_is_initialized(self):
        agent = self.kernel.spawn_agent(1, Lawfulness.CHAOTIC, Temperament.AGGRESSIVE, Patience.WILD)

        self.assertEqual((agent.position.x, agent.position.y), (-390.0, -590.0))
        self.assertEqual((agent.velocity.x, agent.velocity.y), (0.0, 100.0))
        self.assertEqual((agent.size.x, agent.size.y), (20.0, 40.0))
        self.assertEqual(agent.lane_index, 1)
        self.assertEqual(agent.perception.front_distance, -1.0)
        self.assertEqual(agent.perception.last_front_distance, -1.0)
        self.assertIsNone(agent.active_lane_change)
        self.assertIn(agent, self.kernel.state.agents)

    def test_agent_ids_are_unique(self):
        first = self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)
        second = self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)
        self.assertNotEqual(first.id, second.id)

    def test_second_spawn_in_lane_moves_ahead(self):
        first = self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)
        second = self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)

        self.assertEqual(first.position.y, -590.0)
        # One car length of gap between bumpers
        self.assertEqual(second.position.y, -510.0)
        self.assertEqual(second.position.x, first.position.x)

        for _ in range(100):
            self.kernel.run_tick()

        self.assertGreater(first.position.y, -590.0)
        self.assertGreater(second.position.y, -510.0)

    def test_spawn_refused_when_lane_is_full_ahead(self):
        self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL, position_y=560.0)

        with self.assertLogs("lanesim.kernel.simulation_kernel", level="WARNING"):
            refused = self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL, position_y=560.0)

        self.assertIsNone(refused)
        self.assertEqual(len(self.kernel.state.agents), 1)

    def test_spawn_outside_road_is_fatal(self):
        with self.assertRaises(LaneIndexError):
            self.kernel.spawn_agent(2, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)
        self.assertEqual(self.kernel.state.agents, [])

    def test_unknown_trait_rejected_at_spawn(self):
        with self.assertRaises(ValidationError):
            self.kernel.spawn_agent(0, "lawless", Temperament.CALM, Patience.NORMAL)

    def test_spawn_refused_at_capacity(self):
        kernel = SimulationKernel(SimulationSettings(max_agents=1))
        kernel.initialize(populate=False)
        kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)

        with self.assertLogs("lanesim.kernel.simulation_kernel", level="WARNING"):
            refused = kernel.spawn_agent(1, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)

        self.assertIsNone(refused)
        self.assertEqual(len(kernel.state.agents), 1)

    def test_random_spawn_stays_on_the_road(self):
        for _ in range(20):
            agent = self.kernel.spawn_random_agent()
            if agent is None:
                continue
            self.assertIn(agent.lane_index, (0, 1))
            self.assertGreaterEqual(agent.position.y, -580.0)
            self.assertLessEqual(agent.position.y, 580.0)

class TestCommands(unittest.TestCase):
    def setUp(self):
        self.kernel = SimulationKernel()
        self.kernel.initialize(seed=42, populate=False)
        self.agent = self.kernel.spawn_agent(0, Lawfulness.ORDERLY, Temperament.CALM, Patience.NORMAL)

    def test_commands_apply_on_next_tick(self):
        self.kernel.queue_command(SpawnAgentCommand(1, Lawfulness.CHAOTIC, Temperament.CALM, Patience.NORMAL))
        self.assertEqual(len(self.kernel.state.agents), 1)

        self.kernel.run_tick()
        self.assertEqual(len(self.kernel.state.agents), 2)

    def test_random_spawn_command(self):
        self.kernel.queue_command(SpawnRandomAgentCommand())
        self.kernel.run_tick()
        self.assertEqual(len(self.kernel.state.agents), 2)

    def test_modify_replaces_whole_profile(self):
        profile = DriverProfile(lawfulness=Lawfulness.CHAOTIC, temperament=Temperament.PSYCHOTIC, patience=Patience.WILD)
        self.kernel.queue_command(ModifyAgentCommand(self.agent.id, profile))
        self.kernel.run_tick()

        self.assertEqual(self.agent.driver_profile, profile)

    def test_profile_cannot_be_partially_mutated(self):
        with self.assertRaises(ValidationError):
            self.agent.driver_profile.temperament = Temperament.PSYCHOTIC

    def test_modify_unknown_agent_is_ignored(self):
        with self.assertLogs("lanesim.kernel.simulation_kernel", level="WARNING"):
            result = self.kernel.modify_agent("car-999", DriverProfile())
        self.assertIsNone(result)

    def test_remove_agent(self):
        self.kernel.queue_command(RemoveAgentCommand(self.agent.id))
        self.kernel.run_tick()
        self.assertEqual(self.kernel.state.agents, [])

    def test_manual_gas_and_brake(self):
        self.kernel.queue_command(ManualThrottleCommand(self.agent.id))
        self.kernel._consume_commands()
        self.assertEqual(self.agent.velocity.y, 110.0)

        self.agent.velocity.y = 10.0
        self.kernel.queue_command(ManualThrottleCommand(self.agent.id, brake=True))
        self.kernel._consume_commands()
        self.assertEqual(self.agent.velocity.y, 0.0)

    def test_paused_kernel_does_not_advance(self):
        start_y = self.agent.position.y
        self.kernel.queue_command(SetPausedCommand(True))
        for _ in range(5):
            self.kernel.run_tick()

        self.assertEqual(self.kernel.state.tick_id, 0)
        self.assertEqual(self.agent.position.y, start_y)

    def test_step_advances_while_paused(self):
        self.kernel.queue_command(SetPausedCommand(True))
        self.kernel.run_tick()

        self.kernel.step()

        self.assertTrue(self.kernel.state.paused)
        self.assertEqual(self.kernel.state.tick_id, 1)
        self.assertAlmostEqual(self.kernel.state.time, 1 / 64)

    def test_toggle_pause(self):
        self.kernel.queue_command(TogglePauseCommand())
        self.kernel.run_tick()
        self.assertTrue(self.kernel.state.paused)

        self.kernel.queue_command(TogglePauseCommand())
        self.kernel.run_tick()
        self.assertFalse(self.kernel.state.paused)
        self.assertEqual(self.kernel.state.tick_id, 1)

class TestTelemetry(unittest.TestCase):
    def setUp(self):
        self.kernel = SimulationKernel()
        self.kernel.initialize(seed=42)

    def test_state_is_a_copy(self):
        state = self.kernel.get_state()
        view = state.agents[0]
        view.position.x = 1000.0

        self.assertEqual(self.kernel.state.agents[0].position.x, -430.0)
        with self.assertRaises(ValidationError):
            view.lane_index = 1

    def test_get_agent(self):
        agent = self.kernel.state.agents[1]
        view = self.kernel.get_agent(agent.id)
        self.assertEqual(view.id, agent.id)
        self.assertEqual(view.lane_index, 1)
        self.assertIsNone(self.kernel.get_agent("missing"))

    def test_snapshot_without_debug(self):
        self.kernel.run_tick()
        snapshot = self.kernel.get_snapshot()

        self.assertEqual(snapshot["tick"], 1)
        self.assertEqual(len(snapshot["agents"]), 2)
        first = snapshot["agents"][0]
        self.assertEqual(first["lane"], 0)
        self.assertEqual(first["profile"]["temperament"], "passive")
        self.assertNotIn("sight", first)

    def test_snapshot_debug_overlay(self):
        self.kernel.queue_command(SetDebugModeCommand(True))
        self.kernel.run_tick()
        sight = self.kernel.get_snapshot()["agents"][0]["sight"]

        # Passive: 6 car lengths, full sight line
        self.assertEqual(sight["tail_distance"], 240.0)
        self.assertEqual(sight["brake_threshold"], 300.0)
        self.assertEqual(sight["sight_distance"], 300.0)

if __name__ == '__main__':
    unittest.main()
