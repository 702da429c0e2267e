import numpy as np

CALC_TYPE = np.float64


def point(x, y):
    return np.array([x, y], dtype=CALC_TYPE)


# Splits t into column form so that both scalar t
# and an array of parameters broadcast against
# 2D control points:
#   scalar t  -> result shape (2,)
#   t of (n,) -> result shape (n, 2)
def _column(t):
    t = np.asarray(t, dtype=CALC_TYPE)
    return t[..., np.newaxis]


# Cubic Bezier curve point
#   B(t) = (1-t)^3*p0 + 3(1-t)^2*t*p1 + 3(1-t)*t^2*p2 + t^3*p3
# t is not clamped, values outside [0, 1] extrapolate
def position(t, p0, p1, p2, p3):
    t = _column(t)
    u = 1 - t

    return (u**3 * np.asarray(p0, CALC_TYPE)
            + 3 * u**2 * t * np.asarray(p1, CALC_TYPE)
            + 3 * u * t**2 * np.asarray(p2, CALC_TYPE)
            + t**3 * np.asarray(p3, CALC_TYPE))


# Curve derivative
#   B'(t) = 3(1-t)^2*(p1-p0) + 6(1-t)*t*(p2-p1) + 3t^2*(p3-p2)
def derivative(t, p0, p1, p2, p3):
    t = _column(t)
    u = 1 - t

    p0, p1, p2, p3 = (np.asarray(p, CALC_TYPE) for p in (p0, p1, p2, p3))

    return (3 * u**2 * (p1 - p0)
            + 6 * u * t * (p2 - p1)
            + 3 * t**2 * (p3 - p2))


# Unit tangent. Zero derivative gives zero vector:
# length is replaced with 1 before dividing
def tangent(t, p0, p1, p2, p3):
    d = derivative(t, p0, p1, p2, p3)

    length = np.linalg.norm(d, axis=-1, keepdims=True)
    length[length == 0] = 1

    return d / length
