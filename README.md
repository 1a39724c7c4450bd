# yart

A small path tracer. Scenes are made of spheres, planes, axis-aligned boxes
and transformed instances of sub-scenes; surfaces use Lambertian, metal,
dielectric (glass) or emissive materials, and area lights provide direct
lighting. Images are written as PNG files.

## Installing

```
pip install .
```

The only runtime dependency is numpy.

## Rendering the example scenes

Two scenes come with the package:

```
yart-examples 0   # "ray tracing in one weekend" spheres, written to rtiow.png
yart-examples 1   # Cornell box with two boxes and a ceiling light, written to cornell.png
```

Options:

- `--width`, `--height` — image size in pixels (default 400 x 400)
- `--samples` — samples per pixel (default 100)
- `--depth` — maximum path length (default 50)
- `--output-dir` — directory the PNG is written to (default: the current directory)

The command prints tile progress, the time spent and the ray throughput.
Any scene number other than 0 or 1 prints the usage and returns -1.
Rendering in pure Python is slow; expect the full-size scenes to take a
while, and use smaller sizes and sample counts to try things out:

```
yart-examples 1 --width 64 --height 64 --samples 4 --depth 8
```

The scenes can also be built from code with
`yart.examples.build_rtiow_scene(width, height, seed)` and
`yart.examples.build_cornell_box_scene(width, height)`; each returns an
`ExampleScene` holding a committed `scene` and the `filename` it is saved as.

## Using the library

```python
from yart.camera import PerspectiveCamera
from yart.geometry import Sphere
from yart.material import Lambertian
from yart.pngfile import write_png
from yart.renderer import PathTracer, RenderData
from yart.scene import Scene
from yart.texture import ConstantTexture

width = height = 64

camera = PerspectiveCamera.from_size(
    (0.0, 0.0, 5.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 0.0, 40.0, width, height
)
scene = Scene(camera=camera, background=(1.0, 1.0, 1.0))
scene.add(Sphere(1.0, (0.0, 0.0, 0.0)), Lambertian(ConstantTexture((0.8, 0.3, 0.3))))
scene.commit()

data = RenderData(width, height, interleaved=True)
rays = PathTracer(samples=4, depth=8).render_tiled(scene, data)
write_png("sphere.png", data.pixels, width, height)
```

A scene must be committed after shapes are added and before it is rendered.
`Scene.add` returns the shape's identifier; lights are added with
`Scene.add_light`, for example an `AreaLight(plane, DiffuseLight(texture))`.
`Instance(sub_scene)` places a committed scene inside another one through
`scale`, `rotate`, `translate` or `set_transform`.

`DebugRenderer` colours every pixel by the shape it hits (`RenderMode.ID`)
or by its surface normal (`RenderMode.NORMAL`), which is handy for checking
scene layout before a full render.

Renderers accept a `progress` callback that is called with
`(tiles_done, tiles_total)`. Cameras, geometries, materials and renderers
accept a `sampler=Sampler(seed)` keyword for reproducible random numbers.

Textures are `ConstantTexture`, `CheckerBoardTexture` and `ImageTexture`
(which takes raw interleaved 8-bit RGB bytes, rows top first).

## What it does not do

- Rendering runs on a single thread, one tile after another.
- There is no scene description file format; scenes are built in Python.
- Images are only written, as 8-bit RGB PNG; no image files are read.
  `ImageTexture` needs its pixels supplied as bytes.
- Sampling a point on a box picks a face in proportion to its area; spheres,
  planes and instances are sampled too, but only planes are used as area
  lights in the example scenes.

## Running the tests

```
pip install .[test]
pytest
```