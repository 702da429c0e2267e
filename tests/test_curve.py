import numpy as np
import pytest

from curve import Scene, Simulation, TangentMarker


@pytest.fixture
def params():
    return Scene.Params(0.1, 0.88, 100, 100, 12)


@pytest.fixture
def scene():
    return Scene(800, 500)


def test_initial_layout(scene):
    p0, p1, p2, p3 = scene.controls()
    assert np.array_equal(p0, [50, 250])
    assert np.array_equal(p3, [750, 250])
    assert np.allclose(p1, [800 / 3, 250])
    assert np.allclose(p2, [1600 / 3, 250])


def test_targets_are_offset_horizontally(params):
    t1, t2 = Scene.targets((400, 250), params)
    assert np.array_equal(t1, [300, 250])
    assert np.array_equal(t2, [500, 250])


def test_interior_points_follow_pointer(scene, params):
    for _ in range(500):
        scene.update((400, 250), params)

    assert np.linalg.norm(scene.p1.position - [300, 250]) < 0.5
    assert np.linalg.norm(scene.p2.position - [500, 250]) < 0.5


def test_endpoints_never_move(scene, params):
    for _ in range(50):
        scene.update((10, 480), params)

    assert np.array_equal(scene.p0, [50, 250])
    assert np.array_equal(scene.p3, [750, 250])
    with pytest.raises(ValueError):
        scene.p0[0] = 0


def test_polyline(scene, params):
    frame = scene.sample(params)

    assert frame.polyline.shape == (101, 2)
    assert np.allclose(frame.polyline[0], scene.p0)
    assert np.allclose(frame.polyline[-1], scene.p3)


def test_tangent_markers(scene, params):
    scene.update((400, 100), params)
    frame = scene.sample(params)

    assert len(frame.markers) == 8
    for k, marker in enumerate(frame.markers, start=1):
        assert isinstance(marker, TangentMarker)
        assert np.array_equal(marker.anchor, frame.polyline[12 * k])
        assert np.linalg.norm(marker.direction) == pytest.approx(1)
        assert marker.length == 20


def test_no_markers_at_polyline_ends(scene):
    params = Scene.Params(0.1, 0.88, 100, 10, 5)
    frame = scene.sample(params)

    anchors = [m.anchor for m in frame.markers]
    assert len(anchors) == 1
    assert np.array_equal(anchors[0], frame.polyline[5])


def test_frame_controls_are_snapshots(scene, params):
    frame = scene.sample(params)
    scene.update((0, 0), params)

    assert np.allclose(frame.controls[1], [800 / 3, 250])


@pytest.mark.parametrize("kwargs", [
    dict(spring_stiffness=0),
    dict(spring_stiffness=1.5),
    dict(damping=1),
    dict(point_offset=-1),
    dict(num_samples=0),
    dict(num_samples=10.5),
    dict(tangent_interval=0),
])
def test_params_validation(kwargs):
    values = dict(spring_stiffness=0.1, damping=0.88, point_offset=100,
                  num_samples=100, tangent_interval=12)
    values.update(kwargs)

    with pytest.raises(RuntimeError):
        Scene.Params(**values)


def test_params_are_read_only(params):
    with pytest.raises(AttributeError):
        params.damping = 0.5


def test_tick_runs_headless(scene, params):
    sim = Simulation(60, scene, params)

    frame = None
    for _ in range(3):
        frame = sim.tick((400, 250))

    assert sim.nframes == 3
    assert isinstance(frame, Scene.Frame)
    assert np.allclose(frame.controls[1], scene.p1.position)


def test_start_requires_view(scene, params):
    with pytest.raises(RuntimeError):
        Simulation(60, scene, params).start()
