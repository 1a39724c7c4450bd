import pytest

from yart.geometry import Plane, Sphere
from yart.material import Material
from yart.rayhit import INVALID_GEOMETRY_ID, make_ray, make_rayhit
from yart.scene import Scene


def _two_spheres(near_first=True):
    near = Sphere(1.0, (0.0, 0.0, -5.0))
    far = Sphere(1.0, (0.0, 0.0, -10.0))
    scene = Scene()
    for geom in (near, far) if near_first else (far, near):
        scene.add(geom, Material())
    scene.commit()
    return scene


def test_add_keeps_order_and_returns_ids():
    scene = Scene()
    a, b = Sphere(1.0, (0, 0, 0)), Sphere(2.0, (5, 0, 0))
    ma, mb = Material(), Material()
    assert scene.add(a, ma) == 0
    assert scene.add(b, mb) == 1
    assert scene.geometries == (a, b)
    assert scene.materials == (ma, mb)


def test_intersect_requires_commit():
    scene = Scene()
    scene.add(Sphere(1.0, (0, 0, -5)), Material())
    with pytest.raises(RuntimeError):
        scene.intersect(make_rayhit((0, 0, 0), (0, 0, -1)))


def test_adding_after_commit_requires_new_commit():
    scene = _two_spheres()
    assert scene.committed
    scene.add(Sphere(1.0, (3, 3, 3)), Material())
    assert not scene.committed
    with pytest.raises(RuntimeError):
        scene.occluded(make_ray((0, 0, 0), (0, 0, -1)))


def test_closest_hit_is_reported():
    scene = _two_spheres()
    rayhit = make_rayhit((0, 0, 0), (0, 0, -1))
    assert scene.intersect(rayhit)
    assert rayhit.hit.geom_id == 0
    assert rayhit.ray.tfar == pytest.approx(4.0)


def test_closest_hit_independent_of_order():
    scene = _two_spheres(near_first=False)
    rayhit = make_rayhit((0, 0, 0), (0, 0, -1))
    assert scene.intersect(rayhit)
    assert rayhit.hit.geom_id == 1
    assert rayhit.hit.inst_id == INVALID_GEOMETRY_ID


def test_miss_leaves_hit_record_empty():
    scene = _two_spheres()
    rayhit = make_rayhit((0, 0, 0), (0, 0, 1))
    assert not scene.intersect(rayhit)
    assert rayhit.hit.geom_id == INVALID_GEOMETRY_ID


def test_occluded_respects_ray_length():
    scene = _two_spheres()
    assert scene.occluded(make_ray((0, 0, 0), (0, 0, -1)))
    assert not scene.occluded(make_ray((0, 0, 0), (0, 0, -1), 0.0, 3.0))


def test_axis_aligned_ray_hits_flat_plane():
    scene = Scene()
    scene.add(Plane((0, 0, 0), (1, 0, 0), (0, 1, 0)), Material())
    scene.commit()
    rayhit = make_rayhit((0.5, 0.5, 1.0), (0.0, 0.0, -1.0))
    assert scene.intersect(rayhit)
    assert rayhit.hit.geom_id == 0
    assert rayhit.hit.u == pytest.approx(0.5)
    assert rayhit.ray.tfar == pytest.approx(1.0)


def test_background_round_trip():
    scene = Scene()
    assert list(scene.background) == [0.0, 0.0, 0.0]
    scene.background = (1.0, 0.5, 0.25)
    assert list(scene.background) == [1.0, 0.5, 0.25]


def test_lights_are_collected():
    from yart.light import AreaLight
    from yart.material import DiffuseLight
    from yart.texture import ConstantTexture

    plane = Plane((0, 0, 0), (1, 0, 0), (0, 1, 0))
    light = AreaLight(plane, DiffuseLight(ConstantTexture((1, 1, 1))))
    scene = Scene()
    scene.add_light(light)
    assert scene.lights == (light,)