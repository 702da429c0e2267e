import collections
import logging
import time

import numpy as np
import pygame

import bezier
from bezier import CALC_TYPE
from spring import SpringPoint

logger = logging.getLogger(__name__)

# Short segment along the curve direction,
# anchored at a sampled curve point
TangentMarker = collections.namedtuple("TangentMarker", ["anchor", "direction", "length"])


class Scene:
    # Everything the renderer needs for one frame:
    #   polyline - (num_samples + 1, 2) curve vertices
    #   markers  - list of TangentMarker
    #   controls - p0, p1, p2, p3 positions
    Frame = collections.namedtuple("Frame", ["polyline", "markers", "controls"])

    class Params:
        EPSILON = 1e-3
        UPPER_BOUND = 10**4

        # Drag model is stable only inside the open unit interval
        STIFFNESS_CONSTRAINTS = [EPSILON, 1 - EPSILON]
        DAMPING_CONSTRAINTS = [EPSILON, 1 - EPSILON]

        OFFSET_CONSTRAINTS = [0, UPPER_BOUND]
        SAMPLES_CONSTRAINTS = [1, UPPER_BOUND]
        INTERVAL_CONSTRAINTS = [1, UPPER_BOUND]
        LENGTH_CONSTRAINTS = [0, 1000]

        def __init__(self, spring_stiffness, damping, point_offset,
                     num_samples, tangent_interval, tangent_length=20):
            self.spring_stiffness = spring_stiffness
            self.damping = damping
            self.point_offset = point_offset
            self.num_samples = num_samples
            self.tangent_interval = tangent_interval
            self.tangent_length = tangent_length

            self.validate()

        def to_tuple(self):
            return (self.spring_stiffness, self.damping, self.point_offset,
                    self.num_samples, self.tangent_interval, self.tangent_length)

        # Params are read by every frame and never change after validation
        def __setattr__(self, name, value):
            if getattr(self, "_frozen", False):
                raise AttributeError(f"Parameter \"{name}\" is read-only")
            super().__setattr__(name, value)

        @staticmethod
        def _validate1(x, bounds):
            mn, mx = bounds
            return x >= mn and x <= mx

        def validate(self):
            values = self.to_tuple()
            bounds = (self.STIFFNESS_CONSTRAINTS, self.DAMPING_CONSTRAINTS, self.OFFSET_CONSTRAINTS,
                      self.SAMPLES_CONSTRAINTS, self.INTERVAL_CONSTRAINTS, self.LENGTH_CONSTRAINTS)
            names = ("spring_stiffness", "damping", "point_offset",
                     "num_samples", "tangent_interval", "tangent_length")

            for val, bound, name in zip(values, bounds, names):
                if not self._validate1(val, bound):
                    raise RuntimeError(f"Parameter \"{name}\" has incorrect value\n"
                                       f"Expected {bound[0]} <= {name} <= {bound[1]}, got {val}")

            for name in ("num_samples", "tangent_interval"):
                val = getattr(self, name)
                if int(val) != val:
                    raise RuntimeError(f"Parameter \"{name}\" has to be integer, got {val}")

            object.__setattr__(self, "_frozen", True)

    MARGIN = 50

    def __init__(self, width, height):
        self.width = width
        self.height = height

        mid = height / 2

        self.p0 = bezier.point(self.MARGIN, mid)
        self.p3 = bezier.point(width - self.MARGIN, mid)
        self.p0.flags.writeable = False
        self.p3.flags.writeable = False

        self.p1 = SpringPoint(width / 3, mid)
        self.p2 = SpringPoint(width / 3 * 2, mid)

        logger.info("Scene %sx%s created, endpoints %s %s", width, height, self.p0, self.p3)

    def controls(self):
        return self.p0, self.p1.position, self.p2.position, self.p3

    @staticmethod
    def targets(pointer, params: Params):
        pointer = np.asarray(pointer, CALC_TYPE)
        offset = np.array([params.point_offset, 0], dtype=CALC_TYPE)
        return pointer - offset, pointer + offset

    def update(self, pointer, params: Params):
        target1, target2 = self.targets(pointer, params)

        self.p1.update(target1, params.spring_stiffness, params.damping)
        self.p2.update(target2, params.spring_stiffness, params.damping)

    def sample(self, params: Params):
        n = int(params.num_samples)
        step = int(params.tangent_interval)
        controls = self.controls()

        ts = np.arange(n + 1, dtype=CALC_TYPE) / n
        polyline = bezier.position(ts, *controls)

        # Interior samples only, i = 0 and i = n never get a marker
        idx = np.arange(step, n, step)
        directions = bezier.tangent(ts[idx], *controls)

        markers = [TangentMarker(polyline[i], d, params.tangent_length)
                   for i, d in zip(idx, directions)]

        return self.Frame(polyline, markers, tuple(p.copy() for p in controls))


class View:
    BACKGROUND_COLOR = (15, 23, 42)
    LINE_COLOR = (56, 189, 248)
    POINT_COLOR = (244, 114, 182)
    ENDPOINT_COLOR = (226, 232, 240)
    TANGENT_COLOR = (255, 255, 255, 77)
    SKELETON_COLOR = (255, 255, 255, 26)

    LINE_WIDTH = 4
    POINT_RADIUS = 6
    DASH_LENGTH = 5

    def __init__(self, width, height, scale=1.0, caption="Bezier"):
        self.width = width
        self.height = height
        self.scale = float(scale)

        pygame.init()
        pygame.display.set_caption(caption)
        self.screen = pygame.display.set_mode(self._r2px((width, height)))

        # Everything is drawn at logical resolution, then scaled to window
        self.canvas = pygame.Surface((width, height), depth=32)
        self.overlay = pygame.Surface((width, height), pygame.SRCALPHA)

    def _r2px(self, r):
        return tuple(np.round(np.asarray(r, CALC_TYPE) * self.scale, 0).astype(np.int32).tolist())

    # Window pixels to logical surface coordinates
    def px2r(self, px):
        return np.array(px, dtype=CALC_TYPE) / self.scale

    def _line(self, surface, r1, r2, color, width):
        pygame.draw.line(surface, color, tuple(r1), tuple(r2), width)

    def _circ(self, surface, x, r, color):
        pygame.draw.circle(surface, color, tuple(x), r)

    def _dashed_line(self, surface, r1, r2, color):
        r1 = np.asarray(r1, CALC_TYPE)
        r2 = np.asarray(r2, CALC_TYPE)

        length = np.linalg.norm(r2 - r1)
        if length == 0:
            return

        # Dash and gap of equal length
        ndash = int(length // (2 * self.DASH_LENGTH)) + 1
        for i in range(ndash):
            s = min(2 * i * self.DASH_LENGTH / length, 1)
            e = min((2 * i + 1) * self.DASH_LENGTH / length, 1)
            self._line(surface, r1 + (r2 - r1) * s, r1 + (r2 - r1) * e, color, 1)

    def draw(self, frame: Scene.Frame):
        self.canvas.fill(self.BACKGROUND_COLOR)
        self.overlay.fill((0, 0, 0, 0))

        p0, p1, p2, p3 = frame.controls

        pygame.draw.lines(self.canvas, self.LINE_COLOR, False,
                          [tuple(v) for v in frame.polyline], self.LINE_WIDTH)

        # Round line caps
        self._circ(self.canvas, frame.polyline[0], self.LINE_WIDTH / 2, self.LINE_COLOR)
        self._circ(self.canvas, frame.polyline[-1], self.LINE_WIDTH / 2, self.LINE_COLOR)

        for marker in frame.markers:
            tip = marker.anchor + marker.direction * marker.length
            self._line(self.overlay, marker.anchor, tip, self.TANGENT_COLOR, 1)

        self._dashed_line(self.overlay, p0, p1, self.SKELETON_COLOR)
        self._dashed_line(self.overlay, p1, p2, self.SKELETON_COLOR)
        self._dashed_line(self.overlay, p2, p3, self.SKELETON_COLOR)

        self.canvas.blit(self.overlay, (0, 0))

        self._circ(self.canvas, p1, self.POINT_RADIUS, self.POINT_COLOR)
        self._circ(self.canvas, p2, self.POINT_RADIUS, self.POINT_COLOR)
        self._circ(self.canvas, p0, self.POINT_RADIUS / 2, self.ENDPOINT_COLOR)
        self._circ(self.canvas, p3, self.POINT_RADIUS / 2, self.ENDPOINT_COLOR)

        if self.scale == 1:
            self.screen.blit(self.canvas, (0, 0))
        else:
            self.screen.blit(pygame.transform.smoothscale(self.canvas, self.screen.get_size()), (0, 0))

        pygame.display.update()


class Controller:
    # Owns the pointer state. Only process_events() writes it,
    # the frame loop reads it once per tick
    def __init__(self, view: View):
        self.view = view
        self.running = True

        # Centered to prevent the points jumping on start
        self.pointer = np.array([view.width / 2, view.height / 2], dtype=CALC_TYPE)

    def process_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.type == pygame.MOUSEMOTION:
                self.pointer = self.view.px2r(event.pos)

        return self.pointer


class Simulation:
    def __init__(self, fps, scene: Scene, params: Scene.Params, view: View = None, controller: Controller = None):
        self.scene = scene
        self.params = params
        self.view = view
        self.controller = controller
        self.fps = fps
        self.nframes = 0

    # One frame: update springs, then sample the curve.
    # Does not touch the window, so it runs headless
    def tick(self, pointer):
        self.scene.update(pointer, self.params)
        self.nframes += 1
        return self.scene.sample(self.params)

    def start(self):
        if self.view is None or self.controller is None:
            raise RuntimeError("Simulation needs a view and a controller to start")

        logger.info("Starting at %s fps, %s", self.fps, self.params.to_tuple())

        while self.controller.running:
            t_start = time.perf_counter()

            pointer = self.controller.process_events()
            frame = self.tick(pointer)
            self.view.draw(frame)

            t_end = time.perf_counter()

            sleep_time = 1/self.fps - (t_end - t_start)
            if sleep_time > 0:
                time.sleep(sleep_time)

            t_end_2 = time.perf_counter()

            if self.nframes % self.fps == 0:
                logger.debug("fps: %d, p1: %s, p2: %s", int(1 / (t_end_2 - t_start)),
                             self.scene.p1, self.scene.p2)

        logger.info("Stopped after %d frames", self.nframes)
        pygame.quit()
