import pytest

import fingerboxgen as gen


def _codes(warns):
    return [w.code for w in warns]


def test_mating_edges_have_opposite_polarity():
    # Teeth on one side of every shared edge, slots on the other.
    for (side_a, edge_a), (side_b, edge_b) in gen.MATING_EDGES:
        a = gen.joint_pattern(side_a, "closed").edge(edge_a)
        b = gen.joint_pattern(side_b, "closed").edge(edge_b)
        assert a is not None and b is not None
        assert a != b, (side_a, edge_a, side_b, edge_b)


def test_every_panel_edge_is_mated_once():
    seen = [pair for edge in gen.MATING_EDGES for pair in edge]
    assert len(seen) == len(set(seen)) == 24
    for side in gen.PanelSide:
        for name in ("top", "right", "bottom", "left"):
            assert (side, name) in seen


def test_open_box_rim_is_plain():
    for side in (gen.PanelSide.FRONT, gen.PanelSide.BACK, gen.PanelSide.LEFT, gen.PanelSide.RIGHT):
        pattern = gen.joint_pattern(side, "open")
        assert pattern.top is None
        assert pattern.bottom is gen.joint_pattern(side, "closed").bottom
    assert gen.joint_pattern(gen.PanelSide.BOTTOM, "open") == gen.joint_pattern(gen.PanelSide.BOTTOM, "closed")


def test_pattern_edge_lookup():
    p = gen.joint_pattern(gen.PanelSide.LEFT)
    assert p.edge("right") is True
    assert p.edge("top") is False
    with pytest.raises(KeyError):
        p.edge("front")


def test_defaults_validate_cleanly():
    spec = gen.BoxSpec(joint_type="finger")
    gen.validate_box_spec(spec)
    assert gen.validate_params(spec) == []


def test_thick_material_warning():
    spec = gen.BoxSpec(width=40, height=100, depth=100, thickness=12, joint_type="flat")
    assert _codes(gen.validate_params(spec)) == ["THICK_MATERIAL"]


def test_finger_larger_than_edge_warning():
    spec = gen.BoxSpec(width=100, height=100, depth=30, thickness=5, joint_type="finger", finger_size=25)
    warns = gen.validate_params(spec)
    assert "FINGER_LARGER_THAN_EDGE" in _codes(warns)
    assert any("depth" in w.message for w in warns)
    assert all(w.severity == "warn" for w in warns)


def test_narrow_finger_warning():
    spec = gen.BoxSpec(width=100, height=100, depth=100, thickness=6, joint_type="finger", finger_size=3)
    assert "FINGER_NARROWER_THAN_MATERIAL" in _codes(gen.validate_params(spec))


def test_flat_joints_skip_finger_warnings():
    spec = gen.BoxSpec(joint_type="flat", finger_size=1000)
    assert gen.validate_params(spec) == []


@pytest.mark.parametrize(
    "kwargs,exc",
    [
        ({"width": 0}, gen.InvalidDimension),
        ({"depth": -5}, gen.InvalidDimension),
        ({"thickness": 0}, gen.InvalidDimension),
        ({"width": 20, "thickness": 10}, gen.InvalidDimension),
        ({"joint_type": "finger", "finger_size": None}, gen.MissingFingerSize),
        ({"joint_type": "finger", "finger_size": 0}, gen.MissingFingerSize),
        ({"joint_type": "dovetail"}, ValueError),
        ({"box_type": "lidded"}, ValueError),
        ({"units": "cm"}, ValueError),
    ],
)
def test_invalid_specs_are_rejected(kwargs, exc):
    with pytest.raises(exc):
        gen.validate_box_spec(gen.BoxSpec(**kwargs))


def test_flat_box_ignores_missing_finger_size():
    gen.validate_box_spec(gen.BoxSpec(joint_type="flat", finger_size=None))


def test_box_spec_from_params():
    spec = gen.box_spec_from_params(
        {"width": "120", "joint_type": " Finger ", "box_type": "OPEN", "finger_size": 8, "units": "inch"}
    )
    assert spec.width == 120.0
    assert spec.height == 100.0
    assert spec.joint_type == "finger"
    assert spec.box_type == "open"
    assert spec.finger_size == 8.0
    assert spec.units == "inch"

    assert gen.box_spec_from_params({"finger_size": None}).finger_size is None
    with pytest.raises(TypeError):
        gen.box_spec_from_params([("width", 10)])
