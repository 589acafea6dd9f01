#!/usr/bin/env python3

import os
import sys

# Allow running this script directly (sys.path[0] is examples/).
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import fingerboxgen as gen


def generate(out_dir: str, meshes: bool = False):
    os.makedirs(out_dir, exist_ok=True)

    examples = [
        (
            "finger_closed",
            gen.BoxSpec(width=135, height=90, depth=110, thickness=3, joint_type="finger", box_type="closed", finger_size=10),
        ),
        (
            "finger_open_tray",
            gen.BoxSpec(width=200, height=60, depth=140, thickness=4, joint_type="finger", box_type="open", finger_size=12),
        ),
        (
            "flat_closed",
            gen.BoxSpec(width=100, height=100, depth=100, thickness=5, joint_type="flat", box_type="closed"),
        ),
        (
            "flat_open",
            gen.BoxSpec(width=100, height=100, depth=100, thickness=5, joint_type="flat", box_type="open"),
        ),
        (
            "finger_closed_inch",
            gen.BoxSpec(width=6, height=4, depth=4, thickness=0.125, joint_type="finger", box_type="closed",
                        finger_size=0.5, units="inch"),
        ),
    ]

    for name, spec in examples:
        box = gen.build_box(spec)
        for panel in box.panels:
            gen.check_outline(panel)
        svg = gen.make_svg(box.panels, meta=spec.__dict__, units=spec.units)
        with open(os.path.join(out_dir, f"{name}.svg"), "w", encoding="utf-8") as f:
            f.write(svg)

        if meshes:
            import fingerboxgen_mesh

            fingerboxgen_mesh.export_mesh(box, os.path.join(out_dir, f"{name}.glb"))


if __name__ == "__main__":
    generate(os.path.join(os.path.dirname(__file__)), meshes="--meshes" in sys.argv[1:])
