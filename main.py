# main.py
"""
Main entry point for the cylinder particle simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Validates the containment geometry and creates the particles.
4. Runs the main loop: one simulation tick, then one rendered frame.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import cProfile
import pstats
import io


def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Cylinder Particle Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from geometry import ContainmentGeometry
    from particle import ParticleSystem
    from simulation import Simulation

    # --- Component Initialization ---
    # Configuration errors surface here, once, before the first frame.
    geometry = ContainmentGeometry.from_params(sim_params).validate()
    particles = ParticleSystem(sim_params, geometry)
    sim = Simulation(particles)

    headless = run_params.get('headless', False)
    visualizer = None
    if not headless:
        # Imported lazily so headless runs never touch the display.
        from visualization import Visualizer
        visualizer = Visualizer(geometry, vis_params)

    log_throttle = max(1, run_params.get('log_throttle_steps', 100))
    # 0 means run until the window is closed.
    max_steps = run_params.get('max_steps', 0)
    if headless and max_steps <= 0:
        msg = "Configuration error: a headless run needs a positive max_steps."
        logging.critical(msg)
        raise ValueError(msg)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    running = True
    if profiler is not None:
        profiler.enable()
    while running:
        sim.step()

        if visualizer is not None and not visualizer.draw(particles, sim):
            running = False

        # Rule 2.4: Hot loops must throttle logs
        if sim.step_count % log_throttle == 0:
            logging.info(f"Simulation step {sim.step_count}")
            logging.debug(
                f"Step {sim.step_count} | Kinetic energy: {sim.kinetic_energy():.4f} | "
                f"Wall bounces: {sim.wall_bounces} | Cap bounces: {sim.cap_bounces} | "
                f"Containment error: {sim.max_containment_error():.2e}"
            )

        if max_steps > 0 and sim.step_count >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    if profiler is not None:
        profiler.disable()

    if visualizer is not None:
        visualizer.close()
    logging.info(
        f"Simulation loop finished after {sim.step_count} steps "
        f"({sim.wall_bounces} wall bounces, {sim.cap_bounces} cap bounces)."
    )

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Cylinder Particle Simulation Shutting Down ---")
    return sim


if __name__ == "__main__":
    main(*sys.argv[1:2])
