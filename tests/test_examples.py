import numpy as np
import pytest

from yart.examples import build_cornell_box_scene, build_rtiow_scene, main
from yart.instance import Instance
from yart.light import AreaLight
from yart.material import DiffuseLight, Lambertian, Metal
from yart.pngfile import PNG_SIGNATURE
from yart.rayhit import make_rayhit
from yart.geometry import Plane, Sphere


def test_cornell_box_contents():
    example = build_cornell_box_scene(8, 8)
    scene = example.scene
    assert example.filename == "cornell.png"
    assert len(scene.geometries) == 8
    assert len(scene.materials) == len(scene.geometries)
    assert all(isinstance(g, Plane) for g in scene.geometries[:6])
    assert all(isinstance(g, Instance) for g in scene.geometries[6:])
    assert isinstance(scene.materials[5], DiffuseLight)
    assert len(scene.lights) == 1
    assert isinstance(scene.lights[0], AreaLight)
    assert scene.lights[0].geom is scene.geometries[5]
    assert np.allclose(scene.background, 0.0)
    assert scene.committed


def test_cornell_box_ray_hits_inside():
    scene = build_cornell_box_scene(8, 8).scene
    rayhit = make_rayhit((278.0, 278.0, 800.0), (0.0, 0.0, -1.0))
    assert scene.intersect(rayhit)
    assert 0 <= rayhit.hit.geom_id < len(scene.geometries)
    assert rayhit.ray.tfar <= 800.0 + 555.0 + 1e-6


def test_cornell_camera_aspect_follows_size():
    scene = build_cornell_box_scene(20, 10).scene
    assert scene.camera.film.width == pytest.approx(2.0 * scene.camera.film.height)


def test_rtiow_is_reproducible_with_seed():
    first = build_rtiow_scene(8, 8, seed=3).scene
    second = build_rtiow_scene(8, 8, seed=3).scene
    assert len(first.geometries) == len(second.geometries)
    for a, b in zip(first.geometries, second.geometries):
        assert np.allclose(a.center, b.center)
        assert a.radius == b.radius


def test_rtiow_layout():
    example = build_rtiow_scene(8, 8, seed=1)
    scene = example.scene
    assert example.filename == "rtiow.png"
    geoms = scene.geometries
    assert all(isinstance(g, Sphere) for g in geoms)
    assert 4 < len(geoms) <= 4 + 22 * 22
    assert geoms[0].radius == 1000.0
    assert np.allclose(geoms[0].center, (0.0, -1000.0, 0.0))
    assert [tuple(g.center) for g in geoms[-3:]] == [
        (0.0, 1.0, 0.0),
        (-4.0, 1.0, 0.0),
        (4.0, 1.0, 0.0),
    ]
    assert isinstance(scene.materials[-1], Metal)
    assert isinstance(scene.materials[-2], Lambertian)
    assert np.allclose(scene.background, 1.0)
    assert not scene.lights


def test_rtiow_small_spheres_avoid_metal_ball():
    scene = build_rtiow_scene(8, 8, seed=7).scene
    for sphere in scene.geometries[1:-3]:
        assert sphere.radius == 0.2
        assert np.linalg.norm(sphere.center - np.array([4.0, 2.0, 0.0])) > 0.9


def test_main_renders_cornell_png(tmp_path, capsys):
    code = main(
        ["1", "--width", "4", "--height", "4", "--samples", "1", "--depth", "2",
         "--output-dir", str(tmp_path)]
    )
    assert code == 0
    data = (tmp_path / "cornell.png").read_bytes()
    assert data.startswith(PNG_SIGNATURE)
    out = capsys.readouterr().out
    assert "Render progress: 1/1" in out
    assert "Time used(ms):" in out
    assert "Mrays/sec:" in out


def test_main_rejects_unknown_scene(tmp_path, capsys):
    code = main(["7", "--output-dir", str(tmp_path)])
    assert code == -1
    assert "unrecognised scene number" in capsys.readouterr().out
    assert not list(tmp_path.iterdir())


def test_main_requires_scene_argument():
    with pytest.raises(SystemExit):
        main([])