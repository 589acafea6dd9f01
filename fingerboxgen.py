#!/usr/bin/env python3
"""fingerboxgen.py

Parametric finger-jointed box generator: 2D panel outlines with interlocking
finger joints and 3D placements for the six panels of a rectangular box.

Joint rule (half-gap, centred extension):
- count = max(1, floor((length + finger_size) / (2 * finger_size)))
- every jointed edge is cut into 2*count + 1 equal segments:
  gap, tooth, gap, tooth, ..., gap
  so both ends of an edge open with the same margin.
- A panel wider than its finger-bearing span ("extended") keeps the finger
  region centred and fills the margins on both sides with solid material.

Conventions:
- Panel-local coordinates are centred on the panel, y up, divided by MODEL_SCALE.
- Outlines run counter-clockwise from the bottom-left corner (x0, y0):
  bottom -> right -> top -> left. The closing point is not repeated.
- Teeth protrude one material thickness away from the panel body; slots cut
  one thickness into it. Mating edges always carry opposite polarity.
- Placements are (position, XYZ euler rotation) in model units. Extrusion
  runs along local +z; see fingerboxgen_mesh.py for solids and transforms.
"""

from __future__ import annotations

import argparse
import json
import math
import textwrap
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

__version__ = "0.3"

Point = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Segment = Tuple[Point, Point]

# Nominal units per model unit.
MODEL_SCALE = 100.0

JOINT_TYPES = ("flat", "finger")
BOX_TYPES = ("open", "closed")
UNITS = ("mm", "inch")


class InvalidDimension(ValueError):
    """Dimensions that cannot describe a physical box or panel."""


class MissingFingerSize(ValueError):
    """Finger joints were requested without a positive finger size."""


@dataclass
class WarningMsg:
    severity: str  # error|warn|info
    code: str
    message: str
    fix: str


def fmt(n: float) -> str:
    return f"{n:.3f}".rstrip("0").rstrip(".")


def add(p: Point, q: Point) -> Point:
    return (p[0] + q[0], p[1] + q[1])


def mul(p: Point, s: float) -> Point:
    return (p[0] * s, p[1] * s)


def compact_points(points: Sequence[Point]) -> List[Point]:
    """Drop consecutive duplicates (zero-length steps)."""
    out: List[Point] = []
    for p in points:
        if not out or p != out[-1]:
            out.append(p)
    return out


def bbox_points(points: Sequence[Point]) -> Tuple[float, float, float, float]:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def polygon_area(points: Sequence[Point]) -> float:
    if len(points) < 3:
        return 0.0
    pts = list(points)
    a = 0.0
    for (x0, y0), (x1, y1) in zip(pts, pts[1:] + [pts[0]]):
        a += x0 * y1 - x1 * y0
    return 0.5 * a


def polyline_to_path(points: Sequence[Point], close: bool = True) -> str:
    if not points:
        return ""
    d = [f"M {fmt(points[0][0])} {fmt(points[0][1])}"]
    for x, y in points[1:]:
        d.append(f"L {fmt(x)} {fmt(y)}")
    if close:
        d.append("Z")
    return " ".join(d)


# ---------------------- Joint dimensions ----------------------


@dataclass(frozen=True)
class JointDimensions:
    count_x: int
    count_y: int
    finger_width: float
    finger_height: float
    t_scaled: float
    x0: float
    y0: float
    x1: float
    y1: float
    finger_area_width: float
    finger_start_x: float

    @property
    def is_extended(self) -> bool:
        return self.finger_start_x > self.x0


def _require_positive(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v) or v <= 0:
        raise InvalidDimension(f"{name} must be a positive finite number, got {value!r}")
    return v


def finger_count(length: float, finger_size: float) -> int:
    """Whole tooth+gap periods that fit along `length`, never fewer than one."""
    return max(1, int(math.floor((length + finger_size) / (2.0 * finger_size))))


def calculate_finger_joint_dimensions(
    width: float,
    height: float,
    thickness: float,
    finger_size: float,
    actual_width: Optional[float] = None,
    *,
    scale: float = MODEL_SCALE,
) -> JointDimensions:
    """Finger counts, segment sizes and corner coordinates for one panel.

    Counts are taken from the finger-bearing `width`; the panel corners use
    `actual_width` when it is wider, with the finger region centred in it.
    """

    w = _require_positive("width", width)
    h = _require_positive("height", height)
    t = float(thickness)
    if not math.isfinite(t) or t < 0:
        raise InvalidDimension(f"thickness must be >= 0, got {thickness!r}")
    if finger_size is None or not math.isfinite(float(finger_size)) or float(finger_size) <= 0:
        raise MissingFingerSize(f"finger joints need a positive finger size, got {finger_size!r}")
    f = float(finger_size)

    panel_width = float(actual_width) if actual_width is not None and actual_width > w else w

    x0 = -panel_width / 2 / scale
    y0 = -h / 2 / scale
    x1 = panel_width / 2 / scale
    y1 = h / 2 / scale

    count_x = finger_count(w, f)
    count_y = finger_count(h, f)

    finger_area_width = w / scale
    return JointDimensions(
        count_x=count_x,
        count_y=count_y,
        finger_width=w / (2 * count_x + 1) / scale,
        finger_height=h / (2 * count_y + 1) / scale,
        t_scaled=t / scale,
        x0=x0,
        y0=y0,
        x1=x1,
        y1=y1,
        finger_area_width=finger_area_width,
        finger_start_x=x0 + (panel_width / scale - finger_area_width) / 2,
    )


# ---------------------- Edge points ----------------------


def _tooth_run(start: Point, dirv: Point, normal_out: Point, seg: float, count: int, depth: float) -> List[Point]:
    """Teeth (depth > 0) or slots (depth < 0) along an edge.

    `start` is where the finger region begins. Segment 0 is a gap; tooth i
    occupies segment 2i+1. The run stops at the end of the last tooth.
    """

    off = mul(normal_out, depth)
    pts: List[Point] = []
    for i in range(count):
        a = add(start, mul(dirv, seg * (2 * i + 1)))
        b = add(start, mul(dirv, seg * (2 * i + 2)))
        pts.extend([a, add(a, off), add(b, off), b])
    return pts


def _edge_points(
    start_corner: Point,
    end_corner: Point,
    region_start: Point,
    dirv: Point,
    normal_out: Point,
    *,
    seg: float,
    count: int,
    t: float,
    has_fingers: Optional[bool],
) -> List[Point]:
    if has_fingers is None:
        return [start_corner, end_corner]
    depth = t if has_fingers else -t
    pts = [start_corner, region_start]
    pts.extend(_tooth_run(region_start, dirv, normal_out, seg, count, depth))
    pts.append(end_corner)
    return compact_points(pts)


def generate_horizontal_finger_points(
    dims: JointDimensions,
    is_extended: bool,
    is_top: bool,
    has_fingers: Optional[bool],
) -> List[Point]:
    """Bottom edge left->right, or top edge right->left.

    Returns the corner-to-corner trace. `has_fingers` True = outward teeth,
    False = inward slots, None = plain edge.
    """

    if is_top:
        y = dims.y1
        start_corner, end_corner = (dims.x1, y), (dims.x0, y)
        dirv, normal_out = (-1.0, 0.0), (0.0, 1.0)
        rx = dims.finger_start_x + dims.finger_area_width if is_extended else dims.x1
    else:
        y = dims.y0
        start_corner, end_corner = (dims.x0, y), (dims.x1, y)
        dirv, normal_out = (1.0, 0.0), (0.0, -1.0)
        rx = dims.finger_start_x if is_extended else dims.x0
    return _edge_points(
        start_corner,
        end_corner,
        (rx, y),
        dirv,
        normal_out,
        seg=dims.finger_width,
        count=dims.count_x,
        t=dims.t_scaled,
        has_fingers=has_fingers,
    )


def generate_vertical_finger_points(
    dims: JointDimensions,
    is_right: bool,
    has_fingers: Optional[bool],
) -> List[Point]:
    """Right edge bottom->top, or left edge top->bottom."""

    if is_right:
        start_corner, end_corner = (dims.x1, dims.y0), (dims.x1, dims.y1)
        dirv, normal_out = (0.0, 1.0), (1.0, 0.0)
    else:
        start_corner, end_corner = (dims.x0, dims.y1), (dims.x0, dims.y0)
        dirv, normal_out = (0.0, -1.0), (-1.0, 0.0)
    return _edge_points(
        start_corner,
        end_corner,
        start_corner,
        dirv,
        normal_out,
        seg=dims.finger_height,
        count=dims.count_y,
        t=dims.t_scaled,
        has_fingers=has_fingers,
    )


# ---------------------- Panel outlines ----------------------


@dataclass(frozen=True)
class JointPattern:
    """Per-edge polarity: True = teeth, False = slots, None = plain edge."""

    top: Optional[bool]
    right: Optional[bool]
    bottom: Optional[bool]
    left: Optional[bool]

    def edge(self, name: str) -> Optional[bool]:
        if name not in ("top", "right", "bottom", "left"):
            raise KeyError(f"edge not found: {name}")
        return getattr(self, name)


def assemble_outline(dims: JointDimensions, pattern: JointPattern, *, is_extended: bool) -> List[Point]:
    edges = [
        generate_horizontal_finger_points(dims, is_extended, False, pattern.bottom),
        generate_vertical_finger_points(dims, True, pattern.right),
        generate_horizontal_finger_points(dims, is_extended, True, pattern.top),
        generate_vertical_finger_points(dims, False, pattern.left),
    ]
    # Each edge starts on the corner the previous one ended on.
    pts: List[Point] = list(edges[0])
    for e in edges[1:]:
        pts.extend(e[1:])
    pts = compact_points(pts)
    while len(pts) > 1 and pts[-1] == pts[0]:
        pts.pop()
    return pts


def finger_panel_outline(
    width: float,
    height: float,
    thickness: float,
    finger_size: float,
    pattern: JointPattern,
    actual_width: Optional[float] = None,
    *,
    scale: float = MODEL_SCALE,
) -> List[Point]:
    dims = calculate_finger_joint_dimensions(
        width, height, thickness, finger_size, actual_width, scale=scale
    )
    return assemble_outline(dims, pattern, is_extended=dims.is_extended)


def flat_panel_outline(width: float, height: float, *, scale: float = MODEL_SCALE) -> List[Point]:
    hx = _require_positive("width", width) / 2 / scale
    hy = _require_positive("height", height) / 2 / scale
    return [(-hx, -hy), (hx, -hy), (hx, hy), (-hx, hy)]


# ---------------------- Box spec ----------------------


@dataclass(frozen=True)
class BoxSpec:
    width: float = 100.0
    height: float = 100.0
    depth: float = 100.0
    thickness: float = 5.0
    joint_type: str = "flat"  # flat | finger
    box_type: str = "closed"  # open | closed
    finger_size: Optional[float] = 10.0
    units: str = "mm"  # mm | inch


def validate_box_spec(spec: BoxSpec) -> None:
    """Raise for specs the geometry engine must not be asked to build."""

    if spec.joint_type not in JOINT_TYPES:
        raise ValueError(f"Unknown joint_type: {spec.joint_type!r}")
    if spec.box_type not in BOX_TYPES:
        raise ValueError(f"Unknown box_type: {spec.box_type!r}")
    if spec.units not in UNITS:
        raise ValueError(f"Unknown units: {spec.units!r}")

    w = _require_positive("width", spec.width)
    h = _require_positive("height", spec.height)
    d = _require_positive("depth", spec.depth)
    t = _require_positive("thickness", spec.thickness)
    if t >= min(w, h, d) / 2:
        raise InvalidDimension(
            f"thickness {fmt(t)} must be less than half the smallest dimension ({fmt(min(w, h, d) / 2)})"
        )

    if spec.joint_type == "finger":
        f = spec.finger_size
        if f is None or not math.isfinite(float(f)) or float(f) <= 0:
            raise MissingFingerSize("joint_type 'finger' requires a positive finger_size")


def validate_params(spec: BoxSpec) -> List[WarningMsg]:
    """Non-blocking advisories for a spec that already passed validate_box_spec."""

    warns: List[WarningMsg] = []
    t = spec.thickness
    if t > min(spec.width, spec.height, spec.depth) / 4:
        warns.append(WarningMsg("warn", "THICK_MATERIAL",
                                "Material thickness is large relative to the box; inner space is small.",
                                "Reduce thickness or enlarge the box."))
    if spec.joint_type != "finger":
        return warns

    f = float(spec.finger_size)
    spans = {
        "width": spec.width - 2 * t,
        "depth": spec.depth - 2 * t,
        "height": spec.height,
    }
    for axis, length in spans.items():
        if f >= length:
            warns.append(WarningMsg("warn", "FINGER_LARGER_THAN_EDGE",
                                    f"Finger size is not smaller than the {axis} joint span; a single finger is used.",
                                    "Reduce finger_size."))
        seg = length / (2 * finger_count(length, f) + 1)
        if seg < t:
            warns.append(WarningMsg("warn", "FINGER_NARROWER_THAN_MATERIAL",
                                    f"Fingers along {axis} ({fmt(seg)}) are narrower than the material; joints may break.",
                                    "Increase finger_size."))
    return warns


def box_spec_from_params(params: dict) -> BoxSpec:
    """Build a BoxSpec from a plain dict (UI state, JSON case files)."""

    if not isinstance(params, dict):
        raise TypeError("params must be a dict")
    finger_size = params.get("finger_size", 10.0)
    return BoxSpec(
        width=float(params.get("width", 100.0)),
        height=float(params.get("height", 100.0)),
        depth=float(params.get("depth", 100.0)),
        thickness=float(params.get("thickness", 5.0)),
        joint_type=str(params.get("joint_type", "flat")).strip().lower(),
        box_type=str(params.get("box_type", "closed")).strip().lower(),
        finger_size=None if finger_size is None else float(finger_size),
        units=str(params.get("units", "mm")).strip().lower(),
    )


# ---------------------- Placement ----------------------


class PanelSide(Enum):
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    BOTTOM = "bottom"
    TOP = "top"


@dataclass(frozen=True)
class BoxExtents:
    """Half-extents shared by every panel's outline and placement (nominal units)."""

    half_width: float
    half_height: float
    half_depth: float
    thickness: float
    is_open: bool

    @classmethod
    def from_spec(cls, spec: BoxSpec) -> "BoxExtents":
        return cls(
            half_width=spec.width / 2,
            half_height=spec.height / 2,
            half_depth=spec.depth / 2,
            thickness=spec.thickness,
            is_open=spec.box_type == "open",
        )

    @property
    def flat_wall_height(self) -> float:
        # Open boxes give the walls the thickness the top panel would take.
        t = self.thickness
        return 2 * self.half_height - (t if self.is_open else 2 * t)

    @property
    def flat_wall_lift(self) -> float:
        return self.thickness / 2 if self.is_open else 0.0


@dataclass(frozen=True)
class PanelExtents:
    finger_width: float
    width: float
    height: float
    lift: float = 0.0

    @property
    def is_extended(self) -> bool:
        return self.width > self.finger_width


@dataclass(frozen=True)
class Placement:
    position: Vec3
    rotation: Vec3  # XYZ euler, radians


@dataclass(frozen=True)
class SideRule:
    label: str
    pattern: JointPattern
    rotation: Vec3
    finger_extents: Callable[[BoxExtents], PanelExtents]
    flat_extents: Callable[[BoxExtents], PanelExtents]
    position: Callable[[BoxExtents, PanelExtents], Vec3]


_NO_ROTATION: Vec3 = (0.0, 0.0, 0.0)
_ABOUT_Y: Vec3 = (0.0, math.pi / 2, 0.0)
_ABOUT_X: Vec3 = (math.pi / 2, 0.0, 0.0)

_WALL_PATTERN = JointPattern(top=False, right=False, bottom=False, left=False)
_END_PATTERN = JointPattern(top=False, right=True, bottom=False, left=True)
_LID_PATTERN = JointPattern(top=True, right=True, bottom=True, left=True)


def _front_back_finger(b: BoxExtents) -> PanelExtents:
    t = b.thickness
    return PanelExtents(2 * b.half_width - 2 * t, 2 * b.half_width, 2 * b.half_height)


def _front_back_flat(b: BoxExtents) -> PanelExtents:
    w = 2 * b.half_width - 2 * b.thickness
    return PanelExtents(w, w, b.flat_wall_height, b.flat_wall_lift)


def _side_finger(b: BoxExtents) -> PanelExtents:
    w = 2 * b.half_depth - 2 * b.thickness
    return PanelExtents(w, w, 2 * b.half_height)


def _side_flat(b: BoxExtents) -> PanelExtents:
    w = 2 * b.half_depth
    return PanelExtents(w, w, b.flat_wall_height, b.flat_wall_lift)


def _lid_finger(b: BoxExtents) -> PanelExtents:
    t = b.thickness
    w = 2 * b.half_width - 2 * t
    return PanelExtents(w, w, 2 * b.half_depth - 2 * t)


def _lid_flat(b: BoxExtents) -> PanelExtents:
    w = 2 * b.half_width
    return PanelExtents(w, w, 2 * b.half_depth)


SIDE_RULES: Dict[PanelSide, SideRule] = {
    PanelSide.FRONT: SideRule(
        "Front Panel", _WALL_PATTERN, _NO_ROTATION, _front_back_finger, _front_back_flat,
        lambda b, p: (0.0, p.lift, b.half_depth - b.thickness),
    ),
    PanelSide.BACK: SideRule(
        "Back Panel", _WALL_PATTERN, _NO_ROTATION, _front_back_finger, _front_back_flat,
        lambda b, p: (0.0, p.lift, -b.half_depth),
    ),
    PanelSide.LEFT: SideRule(
        "Left Panel", _END_PATTERN, _ABOUT_Y, _side_finger, _side_flat,
        lambda b, p: (-b.half_width, p.lift, 0.0),
    ),
    PanelSide.RIGHT: SideRule(
        "Right Panel", _END_PATTERN, _ABOUT_Y, _side_finger, _side_flat,
        lambda b, p: (b.half_width - b.thickness, p.lift, 0.0),
    ),
    PanelSide.BOTTOM: SideRule(
        "Bottom Panel", _LID_PATTERN, _ABOUT_X, _lid_finger, _lid_flat,
        lambda b, p: (0.0, -b.half_height + b.thickness, 0.0),
    ),
    PanelSide.TOP: SideRule(
        "Top Panel", _LID_PATTERN, _ABOUT_X, _lid_finger, _lid_flat,
        lambda b, p: (0.0, b.half_height, 0.0),
    ),
}

# Physically shared edges as ((side, edge), (side, edge)); used to check phase.
MATING_EDGES: List[Tuple[Tuple[PanelSide, str], Tuple[PanelSide, str]]] = [
    ((PanelSide.FRONT, "left"), (PanelSide.LEFT, "left")),
    ((PanelSide.FRONT, "right"), (PanelSide.RIGHT, "left")),
    ((PanelSide.BACK, "left"), (PanelSide.LEFT, "right")),
    ((PanelSide.BACK, "right"), (PanelSide.RIGHT, "right")),
    ((PanelSide.FRONT, "bottom"), (PanelSide.BOTTOM, "top")),
    ((PanelSide.BACK, "bottom"), (PanelSide.BOTTOM, "bottom")),
    ((PanelSide.LEFT, "bottom"), (PanelSide.BOTTOM, "left")),
    ((PanelSide.RIGHT, "bottom"), (PanelSide.BOTTOM, "right")),
    ((PanelSide.FRONT, "top"), (PanelSide.TOP, "top")),
    ((PanelSide.BACK, "top"), (PanelSide.TOP, "bottom")),
    ((PanelSide.LEFT, "top"), (PanelSide.TOP, "left")),
    ((PanelSide.RIGHT, "top"), (PanelSide.TOP, "right")),
]


def joint_pattern(side: PanelSide, box_type: str = "closed") -> JointPattern:
    pattern = SIDE_RULES[side].pattern
    if box_type == "open" and side is not PanelSide.BOTTOM:
        # Nothing mates with the rim of an open box.
        pattern = replace(pattern, top=None)
    return pattern


def panel_extents(spec: BoxSpec, side: PanelSide, box: Optional[BoxExtents] = None) -> PanelExtents:
    box = box or BoxExtents.from_spec(spec)
    rule = SIDE_RULES[side]
    if spec.joint_type == "finger":
        return rule.finger_extents(box)
    return rule.flat_extents(box)


def panel_placement(
    box: BoxExtents,
    side: PanelSide,
    extents: PanelExtents,
    *,
    scale: float = MODEL_SCALE,
) -> Placement:
    rule = SIDE_RULES[side]
    x, y, z = rule.position(box, extents)
    return Placement(position=(x / scale, y / scale, z / scale), rotation=rule.rotation)


# ---------------------- Panels and assembly ----------------------


@dataclass(frozen=True)
class Material:
    name: str
    color: int
    opacity: float = 1.0
    edge_color: int = 0x000000

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return (
            (self.color >> 16) & 0xFF,
            (self.color >> 8) & 0xFF,
            self.color & 0xFF,
            int(round(self.opacity * 255)),
        )


PANEL_MATERIAL = Material("panel", 0x9B87F5, opacity=0.8)


@dataclass(frozen=True)
class Panel:
    name: str
    side: PanelSide
    outline: Tuple[Point, ...]
    thickness: float
    placement: Placement
    material: Material = PANEL_MATERIAL
    jointed: bool = False
    show_edges: bool = True

    @property
    def edge_overlay(self) -> List[Segment]:
        if not self.show_edges:
            return []
        pts = list(self.outline)
        return list(zip(pts, pts[1:] + pts[:1]))

    def bbox(self) -> Tuple[float, float]:
        x0, y0, x1, y1 = bbox_points(self.outline)
        return (x1 - x0, y1 - y0)


@dataclass(frozen=True)
class BoxAssembly:
    spec: BoxSpec
    panels: Tuple[Panel, ...]
    scale: float = MODEL_SCALE

    def names(self) -> List[str]:
        return [p.name for p in self.panels]

    def panel(self, name: str) -> Panel:
        for p in self.panels:
            if p.name == name:
                return p
        raise KeyError(f"panel not found: {name}")

    def by_side(self, side: PanelSide) -> Panel:
        for p in self.panels:
            if p.side is side:
                return p
        raise KeyError(f"panel not found: {side.value}")


def build_panel(
    spec: BoxSpec,
    side: PanelSide,
    *,
    box: Optional[BoxExtents] = None,
    scale: float = MODEL_SCALE,
) -> Panel:
    box = box or BoxExtents.from_spec(spec)
    ext = panel_extents(spec, side, box)
    jointed = spec.joint_type == "finger"
    if jointed:
        outline = finger_panel_outline(
            ext.finger_width,
            ext.height,
            spec.thickness,
            spec.finger_size,
            joint_pattern(side, spec.box_type),
            actual_width=ext.width if ext.is_extended else None,
            scale=scale,
        )
    else:
        outline = flat_panel_outline(ext.width, ext.height, scale=scale)
    return Panel(
        name=SIDE_RULES[side].label,
        side=side,
        outline=tuple(outline),
        thickness=spec.thickness / scale,
        placement=panel_placement(box, side, ext, scale=scale),
        jointed=jointed,
    )


def build_box(spec: BoxSpec, *, scale: float = MODEL_SCALE) -> BoxAssembly:
    """Build every panel of the box. Open boxes have no top panel."""

    validate_box_spec(spec)
    box = BoxExtents.from_spec(spec)
    panels = []
    for side in PanelSide:
        if side is PanelSide.TOP and box.is_open:
            continue
        panels.append(build_panel(spec, side, box=box, scale=scale))
    return BoxAssembly(spec=spec, panels=tuple(panels), scale=scale)


def check_outline(panel: Panel) -> None:
    """Basic invariants every generated outline must hold."""

    pts = panel.outline
    if len(pts) < 4 or abs(polygon_area(pts)) < 1e-12:
        raise RuntimeError(f"Degenerate panel outline: {panel.name}")
    for x, y in pts:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise RuntimeError(f"Non-finite point in panel outline: {panel.name}")
    for (ax, ay), (bx, by) in panel.edge_overlay:
        if (ax != bx) and (ay != by):
            raise RuntimeError(f"Diagonal segment in panel outline: {panel.name}")


@dataclass(frozen=True)
class OutlineRect:
    x: float
    y: float
    width: float
    height: float
    units: str


def front_outline_rect(spec: BoxSpec) -> OutlineRect:
    """Outer rectangle of the front face in nominal units, for CAD exporters."""

    return OutlineRect(0.0, 0.0, float(spec.width), float(spec.height), spec.units)


# ---------------------- SVG cut sheet ----------------------

_SVG_UNITS = {"mm": "mm", "inch": "in"}


@dataclass
class SheetOptions:
    """Layout options in document units."""

    max_row_width: float = 340.0
    gap: float = 12.0
    margin: float = 10.0
    stroke: float = 0.2
    labels: bool = True

    @classmethod
    def for_units(cls, units: str) -> "SheetOptions":
        if units == "inch":
            return cls(max_row_width=13.5, gap=0.5, margin=0.4, stroke=0.01)
        return cls()


def sheet_outline(panel: Panel, scale: float = MODEL_SCALE) -> List[Point]:
    """Outline in nominal units with y pointing down (SVG space)."""
    return [(x * scale, -y * scale) for x, y in panel.outline]


def arrange_panels(
    outlines: List[Tuple[Panel, List[Point]]],
    *,
    max_row_width: float,
    margin: float,
    gap: float,
):
    placed = []
    x = margin
    y = margin
    row_h = 0.0
    total_w = total_h = 0.0
    for panel, pts in outlines:
        x0, y0, x1, y1 = bbox_points(pts)
        bw, bh = x1 - x0, y1 - y0
        if placed and (x + bw > max_row_width):
            x = margin
            y += row_h + gap
            row_h = 0.0
        placed.append((panel, pts, x - x0, y - y0))
        x += bw + gap
        row_h = max(row_h, bh)
        total_w = max(total_w, x)
        total_h = max(total_h, y + row_h)
    return placed, total_w + margin, total_h + margin


def make_svg(
    panels: Sequence[Panel],
    *,
    meta: dict,
    units: str = "mm",
    options: Optional[SheetOptions] = None,
    scale: float = MODEL_SCALE,
) -> str:
    opts = options or SheetOptions.for_units(units)
    svg_unit = _SVG_UNITS.get(units)
    if svg_unit is None:
        raise ValueError(f"Unknown units: {units!r}")

    outlines = [(p, sheet_outline(p, scale)) for p in panels]
    placed, W, H = arrange_panels(outlines, max_row_width=opts.max_row_width, margin=opts.margin, gap=opts.gap)
    meta_comment = "\n".join(textwrap.wrap(json.dumps(meta, ensure_ascii=False), width=120))

    out: List[str] = [
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>\n",
        f"<svg xmlns=\"http://www.w3.org/2000/svg\" width=\"{fmt(W)}{svg_unit}\" height=\"{fmt(H)}{svg_unit}\" "
        f"viewBox=\"0 0 {fmt(W)} {fmt(H)}\">\n",
        f"  <desc>Generated by fingerboxgen v{__version__}</desc>\n",
        f"  <!-- params: {meta_comment} -->\n",
        f'  <g id="CUT" fill="none" stroke="#ff0000" stroke-width="{fmt(opts.stroke)}">\n',
    ]
    label_items: List[Tuple[str, float, float]] = []
    for p, pts, gx, gy in placed:
        gid = p.name.replace(" ", "_").upper()
        out.append(f'    <g id="{gid}" transform="translate({fmt(gx)},{fmt(gy)})">\n')
        out.append(f'      <path d="{polyline_to_path(pts, close=True)}"/>\n')
        out.append("    </g>\n")
        x0, y0, x1, y1 = bbox_points(pts)
        label_items.append((p.name, gx + (x0 + x1) / 2, gy + (y0 + y1) / 2))
    out.append("  </g>\n")

    if opts.labels and label_items:
        font = 4.0 if units == "mm" else 0.16
        out.append(f'  <g id="ENGRAVE" fill="#000000" font-family="Arial, sans-serif" font-size="{fmt(font)}">\n')
        for txt, lx, ly in label_items:
            out.append(f'    <text x="{fmt(lx)}" y="{fmt(ly)}" text-anchor="middle" dominant-baseline="middle">{txt}</text>\n')
        out.append("  </g>\n")
    out.append("</svg>\n")
    return "".join(out)


def _warn_dicts(warns: List[WarningMsg]) -> List[dict]:
    return [w.__dict__.copy() for w in (warns or [])]


def generate_svg(params: dict) -> dict:
    """Public API for UI integration.

    Returns a JSON-serializable dict:
      {"svg": str, "warnings": [{severity, code, message, fix}, ...], "meta": dict}
    """

    spec = box_spec_from_params(params)
    assembly = build_box(spec)
    warns = validate_params(spec)

    options = SheetOptions.for_units(spec.units)
    for key in ("max_row_width", "gap", "margin", "stroke"):
        if params.get(key) is not None:
            setattr(options, key, float(params[key]))
    options.labels = bool(params.get("labels", True))

    meta = {
        "generator": f"fingerboxgen v{__version__}",
        "inputs": spec.__dict__.copy(),
        "panels": assembly.names(),
        "warnings": _warn_dicts(warns),
    }
    svg = make_svg(assembly.panels, meta=meta, units=spec.units, options=options, scale=assembly.scale)
    return {"svg": svg, "warnings": _warn_dicts(warns), "meta": meta}


# ---------------------- CLI ----------------------


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        formatter_class=argparse.RawTextHelpFormatter,
        description=(
            "Finger-jointed box generator: panel outlines (SVG cut sheet) and assembled solids.\n\n"
            "All lengths share one unit (see --units).\n"
        ),
    )
    ap.add_argument("--width", type=float, default=100.0)
    ap.add_argument("--height", type=float, default=100.0)
    ap.add_argument("--depth", type=float, default=100.0)
    ap.add_argument("--thickness", type=float, default=5.0)
    ap.add_argument("--joint-type", choices=list(JOINT_TYPES), default="finger")
    ap.add_argument("--box-type", choices=list(BOX_TYPES), default="closed")
    ap.add_argument("--finger-size", type=float, default=10.0, help="Target finger width")
    ap.add_argument("--units", choices=list(UNITS), default="mm")

    ap.add_argument("--sheet-width", type=float, default=None, help="Layout wrap width (document units)")
    ap.add_argument("--gap", type=float, default=None, help="Spacing between parts in layout")
    ap.add_argument("--stroke", type=float, default=None, help="SVG stroke width for CUT")
    ap.add_argument("--no-labels", action="store_true")

    ap.add_argument("--out", required=True, help="Output SVG path")
    ap.add_argument("--mesh-out", default=None, help="Optional assembled solid (.glb, .gltf, .stl, .obj)")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    spec = BoxSpec(
        width=args.width,
        height=args.height,
        depth=args.depth,
        thickness=args.thickness,
        joint_type=args.joint_type,
        box_type=args.box_type,
        finger_size=args.finger_size,
        units=args.units,
    )
    assembly = build_box(spec)
    for panel in assembly.panels:
        check_outline(panel)

    for w in validate_params(spec):
        print(f"{w.severity.upper()} {w.code}: {w.message} ({w.fix})")

    options = SheetOptions.for_units(spec.units)
    if args.sheet_width is not None:
        options.max_row_width = args.sheet_width
    if args.gap is not None:
        options.gap = args.gap
    if args.stroke is not None:
        options.stroke = args.stroke
    options.labels = not args.no_labels

    meta = spec.__dict__.copy()
    meta["note"] = "Generated by fingerboxgen"
    svg = make_svg(assembly.panels, meta=meta, units=spec.units, options=options, scale=assembly.scale)
    with open(args.out, "w", encoding="utf-8") as f:
        f.write(svg)
    print(f"Wrote {args.out} ({len(assembly.panels)} panels)")

    if args.mesh_out:
        import fingerboxgen_mesh

        fingerboxgen_mesh.export_mesh(assembly, args.mesh_out)
        print(f"Wrote {args.mesh_out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
