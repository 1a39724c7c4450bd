"""Example scenes and a command that renders them to PNG files."""

from __future__ import annotations

import argparse
import math
import random
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from .camera import PerspectiveCamera
from .geometry import Box, Plane, Sphere
from .instance import Instance
from .light import AreaLight
from .material import Dielectric, DiffuseLight, Lambertian, Metal
from .pngfile import write_png
from .renderer import PathTracer, RenderData
from .scene import Scene
from .texture import ConstantTexture

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 400
DEFAULT_SAMPLES = 100
DEFAULT_DEPTH = 50

_USAGE = (
    "examples <n>\n"
    "n=0, ray tracing in one weekend scene\n"
    "n=1, cornnel box scene"
)


@dataclass
class ExampleScene:
    """A committed scene ready to render and the file name to save it as."""

    scene: Scene
    filename: str


def build_rtiow_scene(
    width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT, seed: Optional[int] = None
) -> ExampleScene:
    """Many small random spheres around three large ones on a huge ground sphere."""
    rng = random.Random(seed)
    camera = PerspectiveCamera.from_size(
        (13.0, 2.0, 3.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 0.01, 20.0, width, height
    )
    camera.zoom(10.0)
    scene = Scene(camera=camera, background=(1.0, 1.0, 1.0))

    scene.add(
        Sphere(1000.0, (0.0, -1000.0, 0.0)),
        Lambertian(ConstantTexture((0.5, 0.5, 0.5))),
    )

    avoid = np.array([4.0, 2.0, 0.0])
    for a in range(-11, 11):
        for b in range(-11, 11):
            choice = rng.random()
            center = np.array([a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random()])
            if np.linalg.norm(center - avoid) <= 0.9:
                continue
            if choice < 0.8:
                color = [rng.random() * rng.random() for _ in range(3)]
                material = Lambertian(ConstantTexture(color))
            elif choice < 0.95:
                albedo = [0.5 * (1.0 + rng.random()) for _ in range(3)]
                material = Metal(albedo, 0.5 * rng.random())
            else:
                material = Dielectric(1.5)
            scene.add(Sphere(0.2, center), material)

    scene.add(Sphere(1.0, (0.0, 1.0, 0.0)), Dielectric(1.5))
    scene.add(Sphere(1.0, (-4.0, 1.0, 0.0)), Lambertian(ConstantTexture((0.4, 0.2, 0.1))))
    scene.add(Sphere(1.0, (4.0, 1.0, 0.0)), Metal((0.7, 0.6, 0.5), 0.0))
    scene.commit()
    return ExampleScene(scene, "rtiow.png")


def build_cornell_box_scene(
    width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT
) -> ExampleScene:
    """The Cornell box: coloured walls, a ceiling light and two rotated boxes."""
    camera = PerspectiveCamera.from_size(
        (278.0, 278.0, 800.0), (278.0, 278.0, 0.0), (0.0, 1.0, 0.0), 0.0, 40.0, width, height
    )
    camera.zoom(10.0)
    scene = Scene(camera=camera)

    white = Lambertian(ConstantTexture((0.73, 0.73, 0.73)))
    green = Lambertian(ConstantTexture((0.12, 0.45, 0.15)))
    red = Lambertian(ConstantTexture((0.65, 0.05, 0.05)))

    scene.add(Plane((0, 0, -555), (555, 0, 0), (0, 555, 0)), white)  # back
    scene.add(Plane((0, 0, 0), (555, 0, 0), (0, 0, -555)), white)  # bottom
    scene.add(Plane((0, 555, -555), (555, 0, 0), (0, 0, 555)), white)  # top
    scene.add(Plane((0, 0, 0), (0, 0, -555), (0, 555, 0)), green)  # left
    scene.add(Plane((555, 0, -555), (0, 0, 555), (0, 555, 0)), red)  # right

    lamp = Plane((213, 554, -337), (130, 0, 0), (0, 0, 110))
    emitter = DiffuseLight(ConstantTexture((2.0, 2.0, 2.0)))
    scene.add(lamp, emitter)
    scene.add_light(AreaLight(lamp, emitter))

    unit_box = Scene()
    unit_box.add(Box((-0.5, -0.5, -0.5), (0.5, 0.5, 0.5)), white)
    unit_box.commit()

    short_box = Instance(unit_box)
    short_box.scale((160, 160, 160))
    short_box.rotate(-0.1 * math.pi, (0.0, 1.0, 0.0))
    short_box.translate((370, 80, -145))

    tall_box = Instance(unit_box)
    tall_box.scale((160, 320, 160))
    tall_box.rotate(0.08 * math.pi, (0.0, 1.0, 0.0))
    tall_box.translate((180, 160, -375))

    scene.add(short_box, white)
    scene.add(tall_box, white)
    scene.commit()
    return ExampleScene(scene, "cornell.png")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="examples", description="Render an example scene.")
    parser.add_argument("scene", help="0 = ray tracing in one weekend, 1 = Cornell box")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    parser.add_argument("--samples", type=int, default=DEFAULT_SAMPLES)
    parser.add_argument("--depth", type=int, default=DEFAULT_DEPTH)
    parser.add_argument("--output-dir", default=".")
    return parser.parse_args(list(argv))


def _print_progress(done: int, total: int) -> None:
    print(f"Render progress: {done}/{total}")


def main(argv: Optional[List[str]] = None) -> int:
    """Render the chosen example scene and save it as a PNG file."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    if args.scene == "0":
        example = build_rtiow_scene(args.width, args.height)
    elif args.scene == "1":
        example = build_cornell_box_scene(args.width, args.height)
    else:
        print("unrecognised scene number")
        print(_USAGE)
        return -1
    example.scene.commit()

    data = RenderData(args.width, args.height, interleaved=True)
    renderer = PathTracer(args.samples, args.depth, progress=_print_progress)

    start = time.perf_counter()
    num_rays = renderer.render_tiled(example.scene, data)
    spent_ms = (time.perf_counter() - start) * 1000.0

    mrays = (num_rays / 1_000_000) / (spent_ms / 1000.0 + 1e-6)
    print(f"Time used(ms): {int(spent_ms)}")
    print(f"Mrays/sec: {mrays}")

    out_file = Path(args.output_dir) / example.filename
    write_png(out_file, data.pixels, args.width, args.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())