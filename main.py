"""
3D Obstacle Flock
=================

A flock of boids steering by alignment, cohesion and separation inside a
soft-walled box, turning away from a sphere in the middle.

Controls:
    - W/S: Rotate camera up/down
    - A/D: Rotate camera left/right
    - Q/E: Zoom in/out
    - Mouse drag: Rotate camera
    - Mouse wheel: Zoom
    - SPACE: Pause / resume the flock
    - M: Switch between sequential and snapshot updates
    - ESC: Quit

Usage:
    python main.py                          # Windowed, 50 boids
    python main.py --count 120 --seed 7     # More boids, repeatable spawn
    python main.py --headless --frames 600  # No window, print stats
"""

import argparse
import sys

from boids import Simulation, default_settings
from core import BoidsError, HeadlessSurface


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="3D boids flocking around an obstacle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--count", type=int, help="Number of boids")
    parser.add_argument("--seed", type=int, help="Seed for the spawn positions and velocities")
    parser.add_argument("--mode", choices=["sequential", "snapshot"],
                        help="Neighbor update mode")
    parser.add_argument("--speed-limit", type=float, help="Per-axis speed limit")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--frames", type=int, default=600,
                        help="Frames to run in headless mode (default: 600)")
    parser.add_argument("--report-every", type=int, default=60,
                        help="Headless status interval in frames (0 disables)")
    return parser


def build_settings(args: argparse.Namespace) -> dict:
    """Default settings with command-line overrides applied."""
    settings = default_settings()
    if args.count is not None:
        settings["flock"]["count"] = args.count
    if args.mode is not None:
        settings["flock"]["update_mode"] = args.mode
    if args.speed_limit is not None:
        settings["flock"]["speed_limit"] = args.speed_limit
    settings["seed"] = args.seed
    return settings


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = build_settings(args)

    if args.headless:
        surface = HeadlessSurface(max_frames=args.frames, report_every=args.report_every)
    else:
        # Imported here so headless runs never touch pygame or OpenGL
        from core.application import Application
        surface = Application(settings=settings["environment"])

    simulation = None
    try:
        simulation = Simulation(surface, settings)
        simulation.setup()
        surface.run()
        if args.headless:
            stats = simulation.stats()
            print(f"[App] Done: {stats['frame']} frames, mean speed {stats['mean_speed']:.4f}, "
                  f"max speed {stats['max_speed']:.4f}, {stats['obstacle_hits']} obstacle hits, "
                  f"{stats['wall_reflections']} wall reflections, {stats['outside_walls']} outside walls")
    except BoidsError as e:
        print(f"[App] Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n[App] Interrupted")
    finally:
        if simulation is not None:
            simulation.dispose()
        else:
            surface.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
