import math

import pytest

import fingerboxgen as gen


@pytest.fixture
def dims():
    return gen.calculate_finger_joint_dimensions(100, 80, 5, 10)


@pytest.fixture
def extended():
    return gen.calculate_finger_joint_dimensions(100, 80, 5, 10, actual_width=120)


def _axis_aligned(points):
    for (ax, ay), (bx, by) in zip(points, points[1:]):
        if (ax == bx) == (ay == by):
            return False
    return True


def test_bottom_edge_with_fingers(dims):
    pts = gen.generate_horizontal_finger_points(dims, False, False, True)

    assert pts[0] == (dims.x0, dims.y0)
    assert pts[-1] == (dims.x1, dims.y0)
    # Opens with a gap along the base line.
    assert pts[1] == (pytest.approx(dims.x0 + dims.finger_width), dims.y0)
    # Teeth point down, away from the body, by exactly one thickness.
    assert min(p[1] for p in pts) == pytest.approx(dims.y0 - dims.t_scaled)
    assert max(p[1] for p in pts) == dims.y0
    assert _axis_aligned(pts)


def test_bottom_edge_with_slots(dims):
    pts = gen.generate_horizontal_finger_points(dims, False, False, False)

    assert max(p[1] for p in pts) == pytest.approx(dims.y0 + dims.t_scaled)
    assert min(p[1] for p in pts) == dims.y0
    assert pts[-1] == (dims.x1, dims.y0)
    assert _axis_aligned(pts)


def test_top_edge_runs_right_to_left(dims):
    pts = gen.generate_horizontal_finger_points(dims, False, True, True)

    assert pts[0] == (dims.x1, dims.y1)
    assert pts[-1] == (dims.x0, dims.y1)
    assert max(p[1] for p in pts) == pytest.approx(dims.y1 + dims.t_scaled)
    xs = [p[0] for p in pts]
    assert xs == sorted(xs, reverse=True)


def test_top_edge_with_slots(dims):
    pts = gen.generate_horizontal_finger_points(dims, False, True, False)
    assert min(p[1] for p in pts) == pytest.approx(dims.y1 - dims.t_scaled)
    assert max(p[1] for p in pts) == dims.y1


def test_point_count_per_tooth(dims):
    pts = gen.generate_horizontal_finger_points(dims, False, False, True)
    # corner + 4 per tooth + corner
    assert len(pts) == 2 + 4 * dims.count_x

    excursions = [p for p in pts if p[1] != dims.y0]
    assert len(excursions) == 2 * dims.count_x


def test_extended_bottom_edge_has_solid_margins(extended):
    pts = gen.generate_horizontal_finger_points(extended, True, False, True)

    assert pts[0] == (extended.x0, extended.y0)
    assert pts[1][0] == pytest.approx(extended.finger_start_x)
    assert pts[1][1] == extended.y0
    assert pts[-1] == (extended.x1, extended.y0)

    # Every tooth stays inside the centred finger region.
    outward = [p for p in pts if p[1] < extended.y0]
    region_end = extended.finger_start_x + extended.finger_area_width
    assert min(p[0] for p in outward) > extended.finger_start_x
    assert max(p[0] for p in outward) < region_end


def test_extended_top_edge(extended):
    pts = gen.generate_horizontal_finger_points(extended, True, True, False)

    assert pts[0] == (extended.x1, extended.y1)
    assert pts[1][0] == pytest.approx(extended.finger_start_x + extended.finger_area_width)
    assert pts[-1] == (extended.x0, extended.y1)
    inward = [p for p in pts if p[1] < extended.y1]
    assert min(p[0] for p in inward) > extended.finger_start_x


def test_right_edge_with_fingers(dims):
    pts = gen.generate_vertical_finger_points(dims, True, True)

    assert pts[0] == (dims.x1, dims.y0)
    assert pts[1][0] == dims.x1
    assert pts[1][1] > dims.y0
    assert pts[-1] == (dims.x1, dims.y1)
    assert max(p[0] for p in pts) == pytest.approx(dims.x1 + dims.t_scaled)
    assert _axis_aligned(pts)


def test_right_edge_with_slots(dims):
    pts = gen.generate_vertical_finger_points(dims, True, False)
    assert min(p[0] for p in pts) == pytest.approx(dims.x1 - dims.t_scaled)


def test_left_edge_runs_top_to_bottom(dims):
    pts = gen.generate_vertical_finger_points(dims, False, True)

    assert pts[0] == (dims.x0, dims.y1)
    assert pts[1][1] < dims.y1
    assert pts[-1] == (dims.x0, dims.y0)
    assert min(p[0] for p in pts) == pytest.approx(dims.x0 - dims.t_scaled)


def test_left_edge_with_slots(dims):
    pts = gen.generate_vertical_finger_points(dims, False, False)
    assert max(p[0] for p in pts) == pytest.approx(dims.x0 + dims.t_scaled)
    assert len(pts) == 2 + 4 * dims.count_y


def test_plain_edge_is_corner_to_corner(dims, extended):
    assert gen.generate_horizontal_finger_points(dims, False, True, None) == [(dims.x1, dims.y1), (dims.x0, dims.y1)]
    assert gen.generate_horizontal_finger_points(extended, True, False, None) == [
        (extended.x0, extended.y0),
        (extended.x1, extended.y0),
    ]
    assert gen.generate_vertical_finger_points(dims, True, None) == [(dims.x1, dims.y0), (dims.x1, dims.y1)]


def test_edges_chain_corner_to_corner(dims):
    bottom = gen.generate_horizontal_finger_points(dims, False, False, True)
    right = gen.generate_vertical_finger_points(dims, True, False)
    top = gen.generate_horizontal_finger_points(dims, False, True, False)
    left = gen.generate_vertical_finger_points(dims, False, True)

    assert bottom[-1] == right[0] == (dims.x1, dims.y0)
    assert right[-1] == top[0] == (dims.x1, dims.y1)
    assert top[-1] == left[0] == (dims.x0, dims.y1)
    assert left[-1] == bottom[0] == (dims.x0, dims.y0)


def test_zero_thickness_stays_on_base_edge():
    d = gen.calculate_finger_joint_dimensions(100, 80, 0, 10)
    pts = gen.generate_horizontal_finger_points(d, False, False, True)

    assert pts
    assert max(p[1] for p in pts) <= d.y0
    assert min(p[1] for p in pts) >= d.y0
    assert _axis_aligned(pts)
    assert pts[-1] == (d.x1, d.y0)

    right = gen.generate_vertical_finger_points(d, True, False)
    assert all(p[0] == d.x1 for p in right)


def test_very_small_dimensions_are_finite():
    d = gen.calculate_finger_joint_dimensions(1, 1, 0.1, 0.5)
    for pts in (
        gen.generate_horizontal_finger_points(d, False, False, True),
        gen.generate_horizontal_finger_points(d, False, True, False),
        gen.generate_vertical_finger_points(d, True, True),
        gen.generate_vertical_finger_points(d, False, False),
    ):
        assert pts
        assert all(math.isfinite(x) and math.isfinite(y) for x, y in pts)
        assert _axis_aligned(pts)


def test_segments_are_equal_length(dims):
    pts = gen.generate_horizontal_finger_points(dims, False, False, True)
    base = sorted({round(p[0], 12) for p in pts})
    steps = [b - a for a, b in zip(base, base[1:])]
    assert len(steps) == 2 * dims.count_x + 1
    for s in steps:
        assert s == pytest.approx(dims.finger_width)
