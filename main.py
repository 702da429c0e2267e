import logging
import sys

from curve import Scene, View, Controller, Simulation
from logging_config import setup_logging

SIMULATION_FPS = 60

# Logical drawing surface, pointer coordinates live here
SURFACE_WIDTH = 800
SURFACE_HEIGHT = 500

# On-screen window is the surface scaled by this factor
WINDOW_SCALE = 1.0

# Spring pull towards the target, 0 < k < 1
SPRING_STIFFNESS = 0.1

# Fraction of velocity kept every frame, 0 < damping < 1
DAMPING = 0.88

# Horizontal distance from the pointer to P1/P2 targets
POINT_OFFSET = 100 # px

# Curve resolution
NUM_SAMPLES = 100

# Tangent marker on every N-th sample
TANGENT_INTERVAL = 12
TANGENT_LENGTH = 20 # px

if __name__ == "__main__":
    setup_logging(logging.DEBUG if "-v" in sys.argv[1:] else logging.INFO)

    params = Scene.Params(SPRING_STIFFNESS, DAMPING, POINT_OFFSET,
                          NUM_SAMPLES, TANGENT_INTERVAL, TANGENT_LENGTH)

    scene = Scene(SURFACE_WIDTH, SURFACE_HEIGHT)
    view = View(SURFACE_WIDTH, SURFACE_HEIGHT, WINDOW_SCALE, "Interactive Bezier curve")
    contr = Controller(view)

    sim = Simulation(SIMULATION_FPS, scene, params, view, contr)
    sim.start()
