"""
Command-line entry point for the CT Volume Preset Viewer.

Loads a DICOM directory (or the synthetic phantom), builds the requested
transfer function preset and opens an interactive volume rendering window,
or writes a screenshot when running off-screen.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time

from config import DEFAULT_PRESET, LOADER_MAX_WORKERS, LOADER_SERIES_INDEX
from core import ViewerDTO, RenderParamsDTO, VolumeData
from core.progress import LoadProgress, ProgressPrinter
from transfer.presets import Preset

logger = logging.getLogger("cli")


def _configure_headless_vtk() -> None:
    """Force VTK / PyVista into offscreen mode."""
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")
    os.environ.setdefault("VTK_DEFAULT_RENDER_WINDOW_OFFSCREEN", "1")


def load_volume(dto: ViewerDTO, progress: LoadProgress | None = None) -> VolumeData:
    """Run the configured loader and return the reconstructed volume."""
    from loaders import DicomSeriesLoader, DummyLoader

    if dto.loader_type == "dummy":
        return DummyLoader().load(callback=progress)
    if dto.loader_type != "dicom":
        raise ValueError(f"Unknown loader type '{dto.loader_type}' (expected dicom | dummy)")
    loader = DicomSeriesLoader(
        series_index=dto.series_index,
        map_hu_to_scalar=dto.map_hu_to_scalar,
        max_workers=dto.max_workers,
    )
    return loader.load(dto.input_path, callback=progress)


def log_volume_summary(data: VolumeData, source: str, map_hu_to_scalar: bool) -> None:
    e = data.extent
    lo, hi = data.scalar_range
    logger.info("Loaded volume from: %s", source)
    logger.info("Extent: [%d , %d] x [%d , %d] x [%d , %d]", *e)
    logger.info("Spacing: (%g , %g , %g)", *data.spacing)
    logger.info("Origin: (%g , %g , %g)", *data.origin)
    logger.info("Scalar range: [%g , %g]", lo, hi)
    logger.info("RescaleSlope=%g , RescaleIntercept=%g , mapHUToScalar=%s (%s)",
                data.rescale.slope, data.rescale.intercept,
                "true" if map_hu_to_scalar else "false", data.rescale.source)


def run_viewer(dto: ViewerDTO) -> int:
    """Load, build the preset and render. Returns a process exit code."""
    if dto.off_screen or dto.screenshot:
        _configure_headless_vtk()

    from rendering import RenderEngine

    progress = LoadProgress("load").add_listener(ProgressPrinter())
    source = dto.input_path if dto.loader_type == "dicom" else "synthetic phantom"

    t_start = time.perf_counter()
    try:
        data = load_volume(dto, progress)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Failed to read DICOM series from: {source} ({exc})", file=sys.stderr)
        return 1
    log_volume_summary(data, source, dto.map_hu_to_scalar)
    logger.info("Loaded in %.2fs", time.perf_counter() - t_start)

    engine = RenderEngine(params=dto.render_params, off_screen=dto.off_screen or bool(dto.screenshot))
    engine.set_data(data)
    engine.render_volume()

    if dto.screenshot:
        engine.screenshot(dto.screenshot)
        engine.close()
    else:
        engine.show()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ct-preset-viewer",
        description="Interactive CT volume rendering with HU transfer function presets",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("input", nargs="?", default="", help="DICOM directory.")
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Path to YAML or JSON config file. Overrides other flags.",
    )
    parser.add_argument("--loader", metavar="TYPE", default="dicom", help="Loader type: dicom | dummy.")
    parser.add_argument(
        "--preset",
        metavar="NAME",
        default=DEFAULT_PRESET,
        help=f"Transfer function preset: {' | '.join(p.value for p in Preset)} (case-insensitive).",
    )
    parser.add_argument("--bone-only", action="store_true", help="Force the bone-only preset.")
    parser.add_argument(
        "--convert-to-hu",
        action="store_true",
        help="Convert voxels to HU on load instead of mapping HU landmarks to stored scalars.",
    )
    parser.add_argument("--series", metavar="N", type=int, default=LOADER_SERIES_INDEX,
                        help="Series index to load (-1 = last).")
    parser.add_argument("--workers", metavar="N", type=int, default=LOADER_MAX_WORKERS,
                        help="Parallel file reader threads.")
    parser.add_argument("--no-shade", action="store_true", help="Disable volume shading.")
    parser.add_argument("--screenshot", metavar="FILE", default=None,
                        help="Render off-screen and save an image instead of opening a window.")
    parser.add_argument("--off-screen", action="store_true", help="Render without a display.")
    parser.add_argument("--log-level", metavar="LEVEL", default="INFO", help="Logging level.")
    parser.add_argument("--dry-run", action="store_true", help="Print resolved config without running.")
    return parser


def _resolve_dto(args: argparse.Namespace, parser: argparse.ArgumentParser) -> ViewerDTO:
    """Resolve DTO from config file or inline CLI flags."""
    if args.config:
        cfg_path = args.config
        if cfg_path.endswith(".json"):
            return ViewerDTO.from_json(cfg_path)
        return ViewerDTO.from_yaml(cfg_path)

    if args.loader == "dicom" and not args.input:
        parser.error("Provide a DICOM directory, --loader dummy, or --config FILE")

    return ViewerDTO(
        input_path=args.input,
        loader_type=args.loader,
        series_index=args.series,
        max_workers=args.workers,
        map_hu_to_scalar=not args.convert_to_hu,
        off_screen=args.off_screen,
        screenshot=args.screenshot,
        render_params=RenderParamsDTO(
            preset=args.preset,
            bone_only=args.bone_only,
            shade=not args.no_shade,
        ),
    )


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    dto = _resolve_dto(args, parser)

    if args.dry_run:
        import json

        print("Resolved ViewerDTO:")
        print(json.dumps(dto.to_dict(), indent=2))
        return 0

    try:
        return run_viewer(dto)
    except KeyboardInterrupt:
        print("\nAborted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
