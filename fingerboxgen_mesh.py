"""Solid panels and world-space queries for fingerboxgen assemblies.

fingerboxgen.py produces flat outlines plus a placement per panel. Here the
outline is extruded along local +z by the material thickness, then rotated
and translated into the box frame. The same transform backs the point
coverage queries used to check that panels meet without gaps or overlaps.
"""

from __future__ import annotations

import os
from typing import Dict, List, Sequence

import numpy as np
import shapely
import trimesh
from shapely.geometry import Polygon

from fingerboxgen import BoxAssembly, Panel, Placement


def placement_matrix(placement: Placement) -> np.ndarray:
    """4x4 homogeneous transform: rotate (XYZ euler) then translate."""

    rx, ry, rz = placement.rotation
    m = trimesh.transformations.euler_matrix(rx, ry, rz, axes="rxyz")
    m[:3, 3] = placement.position
    return m


def outline_polygon(panel: Panel) -> Polygon:
    return Polygon(panel.outline)


def local_prism_vertices(panel: Panel) -> np.ndarray:
    pts = np.asarray(panel.outline, dtype=np.float64)
    n = len(pts)
    bottom = np.column_stack([pts, np.zeros(n)])
    top = np.column_stack([pts, np.full(n, panel.thickness)])
    return np.vstack([bottom, top])


def panel_world_vertices(panel: Panel) -> np.ndarray:
    return trimesh.transformations.transform_points(local_prism_vertices(panel), placement_matrix(panel.placement))


def panel_world_bounds(panel: Panel) -> np.ndarray:
    """[[xmin, ymin, zmin], [xmax, ymax, zmax]] of the placed solid."""
    v = panel_world_vertices(panel)
    return np.array([v.min(axis=0), v.max(axis=0)])


def extrude_panel(panel: Panel) -> trimesh.Trimesh:
    mesh = trimesh.creation.extrude_polygon(outline_polygon(panel), height=panel.thickness)
    mesh.apply_transform(placement_matrix(panel.placement))
    mesh.visual.face_colors = list(panel.material.rgba)
    mesh.metadata["name"] = panel.name
    return mesh


def _is_corner(prev, cur, nxt) -> bool:
    d0 = (cur[0] - prev[0], cur[1] - prev[1])
    d1 = (nxt[0] - cur[0], nxt[1] - cur[1])
    return abs(d0[0] * d1[1] - d0[1] * d1[0]) > 0.0


def edge_overlay_lines(panel: Panel) -> np.ndarray:
    """Wireframe of the placed solid as an (n, 2, 3) array of segments.

    Both outline rings plus one vertical edge per outline corner; collinear
    outline vertices get no vertical edge.
    """

    if not panel.show_edges:
        return np.zeros((0, 2, 3))
    pts = list(panel.outline)
    t = panel.thickness
    lines = []
    for a, b in panel.edge_overlay:
        lines.append([(a[0], a[1], 0.0), (b[0], b[1], 0.0)])
        lines.append([(a[0], a[1], t), (b[0], b[1], t)])
    n = len(pts)
    for i, p in enumerate(pts):
        if _is_corner(pts[i - 1], p, pts[(i + 1) % n]):
            lines.append([(p[0], p[1], 0.0), (p[0], p[1], t)])
    arr = np.asarray(lines, dtype=np.float64)
    m = placement_matrix(panel.placement)
    return trimesh.transformations.transform_points(arr.reshape(-1, 3), m).reshape(-1, 2, 3)


def panel_contains(panel: Panel, points: np.ndarray) -> np.ndarray:
    """Boolean mask of world points strictly inside the placed solid."""

    pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
    inv = np.linalg.inv(placement_matrix(panel.placement))
    local = trimesh.transformations.transform_points(pts, inv)
    inside_z = (local[:, 2] > 0.0) & (local[:, 2] < panel.thickness)
    inside_xy = shapely.contains_xy(outline_polygon(panel), local[:, 0], local[:, 1])
    return inside_z & np.asarray(inside_xy, dtype=bool)


def coverage_counts(panels: Sequence[Panel], points: np.ndarray) -> np.ndarray:
    """How many panels contain each world point."""

    pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
    counts = np.zeros(len(pts), dtype=np.int64)
    for panel in panels:
        counts += panel_contains(panel, pts).astype(np.int64)
    return counts


def build_scene(assembly: BoxAssembly, *, edges: bool = True) -> trimesh.Scene:
    """One mesh node per panel, named by label; edges add a wireframe node."""

    scene = trimesh.Scene()
    for panel in assembly.panels:
        scene.add_geometry(extrude_panel(panel), node_name=panel.name, geom_name=panel.name)
        if edges and panel.show_edges:
            path = trimesh.load_path(edge_overlay_lines(panel))
            scene.add_geometry(path, node_name=f"{panel.name} Edges", geom_name=f"{panel.name} Edges")
    return scene


def panel_meshes(assembly: BoxAssembly) -> Dict[str, trimesh.Trimesh]:
    return {p.name: extrude_panel(p) for p in assembly.panels}


def export_mesh(assembly: BoxAssembly, path: str) -> None:
    """Write the assembled box; glTF keeps one node per panel."""

    ext = os.path.splitext(path)[1].lower()
    if ext in (".glb", ".gltf"):
        build_scene(assembly, edges=False).export(file_obj=path)
        return
    meshes: List[trimesh.Trimesh] = list(panel_meshes(assembly).values())
    trimesh.util.concatenate(meshes).export(path)
