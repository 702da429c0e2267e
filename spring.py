import numpy as np
from bezier import CALC_TYPE


class SpringPoint:
    # Point dragged towards a target by a spring with velocity drag.
    # One update() call is one frame, time step is implicitly 1:
    #   v += stiffness * (target - x)
    #   v *= damping
    #   x += v
    # Stable for any 0 < stiffness < 1 and 0 < damping < 1
    def __init__(self, x, y):
        self.position = np.array([x, y], dtype=CALC_TYPE)
        self.velocity = np.zeros(2, dtype=CALC_TYPE)

    def update(self, target, stiffness, damping):
        displacement = np.asarray(target, CALC_TYPE) - self.position

        self.velocity += stiffness * displacement
        self.velocity *= damping
        self.position += self.velocity

    def is_settled(self, target, tolerance):
        offset = np.linalg.norm(np.asarray(target, CALC_TYPE) - self.position)
        speed = np.linalg.norm(self.velocity)
        return offset <= tolerance and speed <= tolerance

    def to_tuple(self): return *self.position, *self.velocity

    def __repr__(self):
        x, y, vx, vy = self.to_tuple()
        return f"SpringPoint(x={x:.3f}, y={y:.3f}, vx={vx:.3f}, vy={vy:.3f})"
