import cli
from core import ViewerDTO
from transfer.presets import Preset


def test_dry_run_prints_resolved_config(capsys):
    assert cli.main(["--loader", "dummy", "--preset", "BONE-ONLY", "--dry-run"]) == 0
    out = capsys.readouterr().out
    assert '"loader_type": "dummy"' in out
    assert '"preset": "BONE-ONLY"' in out


def test_flags_map_to_dto():
    parser = cli._build_parser()
    args = parser.parse_args(["scans/head", "--bone-only", "--convert-to-hu", "--series", "0", "--no-shade"])
    dto = cli._resolve_dto(args, parser)
    assert dto.input_path == "scans/head"
    assert dto.series_index == 0
    assert dto.map_hu_to_scalar is False
    assert dto.render_params.bone_only is True
    assert dto.render_params.shade is False


def test_config_file_overrides_flags(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("loader_type: dummy\nrender_params:\n  preset: cinematic\n")
    parser = cli._build_parser()
    args = parser.parse_args(["--config", str(path), "--preset", "lung"])
    dto = cli._resolve_dto(args, parser)
    assert dto.loader_type == "dummy"
    assert dto.render_params.preset == "cinematic"


def test_load_volume_dummy():
    data = cli.load_volume(ViewerDTO(loader_type="dummy"))
    assert data.raw_data is not None
    assert data.rescale.intercept == -1024.0


def test_missing_directory_exit_code(tmp_path, capsys):
    dto = ViewerDTO(input_path=str(tmp_path / "missing"), off_screen=True)
    assert cli.run_viewer(dto) == 1
    assert "Failed to read DICOM series" in capsys.readouterr().err


def test_preset_help_lists_every_preset():
    parser = cli._build_parser()
    action = next(a for a in parser._actions if a.dest == "preset")
    for preset in Preset:
        assert preset.value in action.help
