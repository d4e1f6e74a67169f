import logging
import time
from typing import Any, Dict, List, Optional

from lanesim.domain.settings import SimulationSettings
from lanesim.kernel.simulation_kernel import SimulationKernel

log = logging.getLogger(__name__)

def run_headless_experiment(
    duration_ticks: int = 100,
    seed: int = 42,
    extra_random_agents: int = 0,
    settings: Optional[SimulationSettings] = None,
) -> List[Dict[str, Any]]:
    kernel = SimulationKernel(settings)
    kernel.initialize(seed=seed)
    for _ in range(extra_random_agents):
        kernel.spawn_random_agent()

    results = []

    start_time = time.perf_counter()
    for i in range(duration_ticks):
        kernel.run_tick()
        agents = kernel.state.agents
        speeds = [agent.velocity.y for agent in agents]
        results.append({
            "tick": i,
            "agent_count": len(agents),
            "mean_speed": sum(speeds) / len(speeds) if speeds else 0.0,
            "active_lane_changes": sum(1 for agent in agents if agent.active_lane_change is not None),
            "agents_with_obstacle": sum(1 for agent in agents if agent.perception.has_obstacle),
        })

    end_time = time.perf_counter()
    log.info("Experiment finished in %.4fs (%d ticks)", end_time - start_time, duration_ticks)

    return results
