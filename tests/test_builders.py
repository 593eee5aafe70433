import pytest

from transfer.builders import (
    BONE_ONLY_LANDMARKS,
    CINEMATIC_LANDMARKS,
    BoneOnlyLandmarks,
    CinematicLandmarks,
    build_bone_only,
    build_cinematic,
    build_windowed,
)
from transfer.presets import WINDOW_PRESETS, Preset
from transfer.rescale import RescaleParameters, to_scalar
from transfer.windowing import WindowLevel

RESCALES = [
    RescaleParameters.identity(),
    RescaleParameters(1.0, -1024.0),
    RescaleParameters(0.5, -1000.0),
    RescaleParameters(0.0, -1024.0),
    RescaleParameters(-2.0, 100.0),
]


def _all_builds(rescale):
    yield build_windowed(WINDOW_PRESETS[Preset.SOFT], rescale)
    yield build_windowed(WINDOW_PRESETS[Preset.BONE], rescale)
    yield build_windowed(WINDOW_PRESETS[Preset.LUNG], rescale)
    yield build_bone_only(rescale)
    yield build_cinematic(rescale)


@pytest.mark.parametrize("rescale", RESCALES)
def test_curves_are_strictly_increasing_and_in_range(rescale):
    for tf in _all_builds(rescale):
        pos = tf.opacity.positions
        assert all(b > a for a, b in zip(pos, pos[1:])), tf.preset
        assert all(0.0 <= v <= 1.0 for v in tf.opacity.values)

        cpos = tf.color.positions
        assert all(b > a for a, b in zip(cpos, cpos[1:])), tf.preset
        for p in tf.color:
            assert 0.0 <= p.r <= 1.0 and 0.0 <= p.g <= 1.0 and 0.0 <= p.b <= 1.0


def test_soft_preset_with_ct_intercept():
    rescale = RescaleParameters(1.0, -1024.0)
    tf = build_windowed(WindowLevel(40.0, 400.0), rescale, preset="soft")

    # low/high of the window in stored scalars
    assert tf.color.positions[0] == 864.0
    assert tf.color.positions[-1] == 1264.0
    assert tf.opacity.positions == [664.0, 864.0, 964.0, 1164.0, 1264.0, 1764.0]
    assert tf.opacity.values == [0.0, 0.02, 0.10, 0.35, 0.80, 0.95]


def test_windowed_grayscale_ramp():
    tf = build_windowed(WindowLevel(40.0, 400.0), RescaleParameters.identity())
    assert [(p.r, p.g, p.b) for p in tf.color] == [
        (0.0, 0.0, 0.0), (0.5, 0.5, 0.5), (0.8, 0.8, 0.8), (1.0, 1.0, 1.0),
    ]


def test_windowed_degenerate_width_still_valid():
    tf = build_windowed(WindowLevel(0.0, 0.0), RescaleParameters.identity())
    pos = tf.opacity.positions
    assert all(b > a for a, b in zip(pos, pos[1:]))


def test_slope_scales_positions():
    rescale = RescaleParameters(0.5, 0.0)
    tf = build_windowed(WindowLevel(40.0, 400.0), rescale)
    assert tf.color.positions[0] == -320.0
    assert tf.color.positions[-1] == 480.0


def test_bone_only_floor_is_transparent():
    rescale = RescaleParameters(1.0, -1024.0)
    tf = build_bone_only(rescale)
    assert tf.opacity.points[0].position == to_scalar(BONE_ONLY_LANDMARKS.floor, rescale)
    assert tf.opacity.points[0].opacity == 0.0
    values = tf.opacity.values
    assert all(b >= a for a, b in zip(values, values[1:]))
    assert len(tf.opacity) == 5
    # soft tissue below the floor stays invisible
    assert tf.opacity.value_at(to_scalar(40.0, rescale)) == 0.0


def test_bone_only_color_ends_white():
    tf = build_bone_only(RescaleParameters.identity())
    last = tf.color.points[-1]
    assert (last.r, last.g, last.b) == (1.0, 1.0, 1.0)
    first = tf.color.points[0]
    assert first.r > first.b  # warm tone


def test_bone_only_color_ramp():
    tf = build_bone_only(RescaleParameters.identity())
    assert [(p.r, p.g, p.b) for p in tf.color] == [
        (0.90, 0.82, 0.68),
        (0.92, 0.86, 0.74),
        (0.96, 0.93, 0.86),
        (1.0, 1.0, 1.0),
        (1.0, 1.0, 1.0),
    ]
    assert tf.color.positions == list(BONE_ONLY_LANDMARKS.hu_values)


def test_bone_only_accepts_tuned_floor():
    landmarks = BoneOnlyLandmarks(floor=180.0, opacities=(0.0, 0.02, 0.35, 0.85, 0.95))
    tf = build_bone_only(RescaleParameters.identity(), landmarks)
    assert tf.opacity.positions[0] == 180.0


def test_bone_only_rejects_bad_ordering():
    with pytest.raises(ValueError):
        BoneOnlyLandmarks(floor=300.0, ramp=250.0)
    with pytest.raises(ValueError):
        BoneOnlyLandmarks(opacities=(0.0, 0.5, 0.4, 0.9, 0.97))


def test_cinematic_air_and_fat_transparent():
    rescale = RescaleParameters(1.0, -1024.0)
    tf = build_cinematic(rescale)
    by_pos = {p.position: p.opacity for p in tf.opacity}
    assert by_pos[to_scalar(CINEMATIC_LANDMARKS.air, rescale)] == 0.0
    assert by_pos[to_scalar(CINEMATIC_LANDMARKS.fat, rescale)] == 0.0
    assert by_pos[to_scalar(CINEMATIC_LANDMARKS.teeth, rescale)] >= 0.90
    values = tf.opacity.values[1:]
    assert all(b > a for a, b in zip(values, values[1:]))


def test_cinematic_rejects_visible_air():
    with pytest.raises(ValueError):
        CinematicLandmarks(opacities=(0.1, 0.1, 0.15, 0.2, 0.35, 0.80, 0.95, 0.98))


def test_negative_slope_reorders_points():
    rescale = RescaleParameters(-1.0, 0.0)
    tf = build_bone_only(rescale)
    # floor (150 HU) now sits at the highest scalar position
    assert tf.opacity.points[-1].position == -150.0
    assert tf.opacity.points[-1].opacity == 0.0


def test_builds_are_fresh_objects():
    rescale = RescaleParameters(1.0, -1024.0)
    a = build_cinematic(rescale)
    b = build_cinematic(rescale)
    assert a == b
    assert a is not b
