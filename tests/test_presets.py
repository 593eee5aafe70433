import pytest

from transfer.presets import (
    Preset,
    WINDOW_PRESETS,
    build_transfer_function,
    normalize_token,
    select_preset,
)
from transfer.rescale import RescaleParameters


def test_mixed_case_bone_only():
    assert select_preset("BONE-ONLY").preset is Preset.BONE_ONLY


def test_underscore_and_whitespace_are_normalised():
    assert normalize_token("  Bone_Only ") == "bone-only"
    assert select_preset("Bone_Only").preset is Preset.BONE_ONLY


def test_unknown_preset_falls_back_to_soft_with_warning():
    with pytest.warns(RuntimeWarning, match="xyz"):
        selection = select_preset("xyz")
    assert selection.preset is Preset.SOFT
    assert selection.fallback
    assert selection.requested == "xyz"


def test_bone_only_flag_beats_windowed_bone():
    selection = select_preset("bone", bone_only=True)
    assert selection.preset is Preset.BONE_ONLY
    assert not selection.fallback


def test_bone_only_flag_beats_cinematic():
    assert select_preset("cinematic", bone_only=True).preset is Preset.BONE_ONLY


@pytest.mark.parametrize("token, preset", [
    ("soft", Preset.SOFT),
    ("Bone", Preset.BONE),
    ("LUNG", Preset.LUNG),
    ("Cinematic", Preset.CINEMATIC),
])
def test_known_tokens(token, preset):
    selection = select_preset(token)
    assert selection.preset is preset
    assert not selection.fallback


def test_window_table():
    assert WINDOW_PRESETS[Preset.SOFT].center == 40.0
    assert WINDOW_PRESETS[Preset.SOFT].width == 400.0
    assert WINDOW_PRESETS[Preset.BONE].center == 300.0
    assert WINDOW_PRESETS[Preset.LUNG].center == -600.0
    assert select_preset("lung").window is WINDOW_PRESETS[Preset.LUNG]
    assert select_preset("cinematic").window is None
    assert Preset.BONE.is_windowed and not Preset.BONE_ONLY.is_windowed


def test_build_dispatches_every_preset():
    rescale = RescaleParameters(1.0, -1024.0)
    for preset in Preset:
        tf = build_transfer_function(select_preset(preset.value), rescale)
        assert tf.preset == preset.value
        assert len(tf.opacity) >= 5


def test_build_requires_rescale():
    with pytest.raises(ValueError):
        build_transfer_function(select_preset("soft"), None)
