import math

import numpy as np
import pytest

from yart.material import Dielectric, DiffuseLight, Lambertian, Material, Metal
from yart.rayhit import make_rayhit, reflect
from yart.sampler import Sampler
from yart.texture import ConstantTexture, ImageTexture


def _hit(direction, normal=(0.0, 1.0, 0.0), origin=(0.0, 1.0, 0.0), tfar=1.0, u=0.25, v=0.75):
    rayhit = make_rayhit(origin, direction, 0.0, tfar)
    rayhit.hit.normal = np.array(normal, dtype=float)
    rayhit.hit.u = u
    rayhit.hit.v = v
    return rayhit


def test_base_material_absorbs():
    mat = Material()
    rayhit = _hit((0.0, -1.0, 0.0))
    np.testing.assert_array_equal(mat.sample(rayhit).value, np.zeros(3))
    np.testing.assert_array_equal(mat.eval(rayhit, np.ones(3)), np.zeros(3))
    assert mat.is_emissive is False


def test_lambertian_samples_upper_hemisphere_with_cosine_pdf():
    mat = Lambertian(ConstantTexture((0.5, 0.5, 0.5)), sampler=Sampler(3))
    normal = np.array([0.0, 0.0, 1.0])
    rayhit = _hit((0.0, 0.0, -1.0), normal=normal)
    for _ in range(100):
        wi, pdf = mat.sample(rayhit)
        assert np.linalg.norm(wi) == pytest.approx(1.0)
        assert float(wi @ normal) >= 0.0
        assert pdf == pytest.approx(float(wi @ normal) / math.pi)


def test_lambertian_eval_along_normal_is_albedo_over_pi():
    colour = (0.2, 0.4, 0.6)
    mat = Lambertian(ConstantTexture(colour))
    rayhit = _hit((0.0, -1.0, 0.0))
    result = mat.eval(rayhit, (0.0, 2.0, 0.0))
    np.testing.assert_allclose(result * math.pi, colour)


def test_lambertian_eval_ignores_side_and_vanishes_at_grazing():
    mat = Lambertian(ConstantTexture((1.0, 1.0, 1.0)))
    rayhit = _hit((0.0, -1.0, 0.0))
    up = mat.eval(rayhit, (1.0, 1.0, 0.0))
    down = mat.eval(rayhit, (1.0, -1.0, 0.0))
    np.testing.assert_allclose(up, down)
    np.testing.assert_allclose(mat.eval(rayhit, (1.0, 0.0, 0.0)), np.zeros(3), atol=1e-15)


def test_metal_clamps_roughness():
    assert Metal((1.0, 1.0, 1.0), 2.0).roughness == 1.0
    assert Metal((1.0, 1.0, 1.0), -1.0).roughness == 0.0
    assert Metal((1.0, 1.0, 1.0), 0.3).roughness == 0.3


def test_smooth_metal_reflects_mirror_direction():
    mat = Metal((0.7, 0.6, 0.5), 0.0, sampler=Sampler(1))
    rayhit = _hit((1.0, -1.0, 0.0))
    wi, pdf = mat.sample(rayhit)
    np.testing.assert_allclose(wi, reflect((1.0, -1.0, 0.0), (0.0, 1.0, 0.0)))
    np.testing.assert_allclose(wi, [1.0, 1.0, 0.0])
    assert pdf == 1.0


def test_metal_grazing_reflection_is_absorbed():
    mat = Metal((0.7, 0.6, 0.5), 0.0, sampler=Sampler(1))
    wi, _ = mat.sample(_hit((1.0, 0.0, 0.0)))
    np.testing.assert_array_equal(wi, np.zeros(3))


def test_rough_metal_stays_above_surface_or_absorbs():
    mat = Metal((1.0, 1.0, 1.0), 1.0, sampler=Sampler(5))
    rayhit = _hit((1.0, -1.0, 0.0))
    for _ in range(100):
        wi, _ = mat.sample(rayhit)
        assert wi[1] > 0.0 or not wi.any()


def test_metal_eval_returns_albedo():
    mat = Metal((0.7, 0.6, 0.5), 0.2)
    np.testing.assert_allclose(mat.eval(_hit((0.0, -1.0, 0.0)), np.ones(3)), [0.7, 0.6, 0.5])


def test_dielectric_total_internal_reflection():
    mat = Dielectric(1.5, sampler=Sampler(2))
    wo = np.array([1.0, 0.1, 0.0])
    rayhit = _hit(wo)
    for _ in range(10):
        wi, pdf = mat.sample(rayhit)
        np.testing.assert_allclose(wi, reflect(wo, (0.0, 1.0, 0.0)))
        assert pdf == 1.0


def test_dielectric_normal_incidence_mostly_transmits():
    mat = Dielectric(1.5, sampler=Sampler(11))
    rayhit = _hit((0.0, -1.0, 0.0))
    reflected = 0
    draws = 2000
    for _ in range(draws):
        wi, _ = mat.sample(rayhit)
        if wi[1] > 0.0:
            np.testing.assert_allclose(wi, [0.0, 1.0, 0.0], atol=1e-12)
            reflected += 1
        else:
            np.testing.assert_allclose(wi, [0.0, -1.0, 0.0], atol=1e-12)
    assert 0 < reflected < draws // 5


def test_dielectric_eval_is_white():
    mat = Dielectric(1.5)
    np.testing.assert_array_equal(mat.eval(_hit((0.0, -1.0, 0.0)), np.ones(3)), np.ones(3))


def test_diffuse_light_is_emissive_and_returns_texture():
    light = DiffuseLight(ConstantTexture((2.0, 2.0, 2.0)))
    assert light.is_emissive is True
    assert Lambertian(ConstantTexture()).is_emissive is False
    np.testing.assert_allclose(light.eval(_hit((0.0, -1.0, 0.0)), np.zeros(3)), [2.0, 2.0, 2.0])


def test_diffuse_light_uses_surface_coordinates():
    pixels = bytes([255, 0, 0, 0, 0, 255])
    light = DiffuseLight(ImageTexture(pixels, 2, 1))
    np.testing.assert_allclose(light.emitted(0.1, 0.5), [1.0, 0.0, 0.0])
    np.testing.assert_allclose(light.emitted(0.9, 0.5), [0.0, 0.0, 1.0])
    np.testing.assert_allclose(
        light.eval(_hit((0.0, -1.0, 0.0), u=0.9, v=0.5), np.zeros(3)), [0.0, 0.0, 1.0]
    )