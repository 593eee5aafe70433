import numpy as np

from loaders.dummy import DummyLoader, PHANTOM_RESCALE
from transfer.rescale import RescaleParameters, to_hu


def test_phantom_is_stored_with_ct_intercept():
    data = DummyLoader(noise_hu=0.0).load(size=32)
    assert data.dimensions == (32, 32, 32)
    assert data.rescale == PHANTOM_RESCALE
    assert data.spacing == (0.8, 0.8, 1.0)

    # corner voxel is air, centre is water
    assert to_hu(float(data.raw_data[0, 0, 0]), data.rescale) == -1000.0
    assert to_hu(float(data.raw_data[16, 16, 16]), data.rescale) == 0.0
    assert data.raw_data.min() >= 0.0


def test_phantom_contains_bone_range():
    data = DummyLoader(noise_hu=0.0).load(size=48)
    hu = data.raw_data * data.rescale.effective_slope + data.rescale.intercept
    assert np.any(hu >= 1000.0)
    assert np.any(hu == -100.0)


def test_custom_rescale_and_progress():
    calls = []
    rescale = RescaleParameters(0.5, -1000.0)
    data = DummyLoader(rescale=rescale, noise_hu=0.0).load(
        size=24, callback=lambda p, m: calls.append(p))
    assert data.rescale is rescale
    assert to_hu(float(data.raw_data[0, 0, 0]), rescale) == -1000.0
    assert calls[0] == 0 and calls[-1] == 100


def test_seeded_noise_is_reproducible():
    a = DummyLoader(seed=7).load(size=16).raw_data
    b = DummyLoader(seed=7).load(size=16).raw_data
    np.testing.assert_array_equal(a, b)
