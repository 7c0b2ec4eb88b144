# main.py
"""
Main entry point for the starfield.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and builds the starfield.
4. Runs the frame loop until the user quits.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_settings
import cProfile
import pstats
import io

def main():
    """
    The main function to run the starfield.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        settings = load_settings("config.json")
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(settings.logging)

    logging.info("--- Starfield Starting ---")

    run_control = settings.run_control

    from config import StarfieldConfig
    from simulation import Starfield
    from visualization import Visualizer, ACTION_QUIT, ACTION_RESET

    # --- Component Initialization ---
    # 1. The visualizer determines the viewport size.
    visualizer = Visualizer(settings.window)

    # 2. Build the starfield on the visualizer's canvas.
    star_config = settings.starfield
    starfield = Starfield(visualizer.canvas, seed=settings.seed)
    starfield.initialize(star_config.star_count, visualizer.viewport)

    profiler = cProfile.Profile() if run_control.profile else None

    log_throttle = run_control.log_throttle_frames
    max_frames = run_control.max_frames

    running = True
    if profiler:
        profiler.enable()
    while running:
        star_config, action = visualizer.handle_events(star_config)
        if action == ACTION_QUIT:
            break
        if action == ACTION_RESET:
            star_config = StarfieldConfig.defaults()
            starfield.clear_and_reset(star_config, visualizer.viewport)

        # A paused starfield requests no frames; nothing is replayed on resume.
        if not visualizer.paused:
            starfield.render_frame(star_config, visualizer.viewport)

            # Hot loops must throttle logs
            if starfield.frame_count % log_throttle == 0:
                logging.info(f"Frame {starfield.frame_count}")
                logging.debug(
                    f"Frame {starfield.frame_count} | Stars: {len(starfield.particles)} "
                    f"| FPS: {visualizer.clock.get_fps():.1f}"
                )

        visualizer.present(star_config, starfield.frame_count)

        if max_frames and starfield.frame_count >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping.")
            running = False
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Starfield Shutting Down ---")


if __name__ == "__main__":
    main()
