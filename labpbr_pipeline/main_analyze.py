"""Command line interface for the LabPBR specular codec."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from .core import config

LOGGER = logging.getLogger("labpbr_pipeline.main_analyze")

_ISSUE_LOG_LEVELS = {"error": logging.ERROR, "warning": logging.WARNING, "info": logging.INFO}


class BoolAction(argparse.Action):
    """Robust boolean flag parser supporting affirmative and negative forms."""

    def __call__(self, parser, namespace, values, option_string=None):  # type: ignore[override]
        if values is None:
            setattr(namespace, self.dest, True)
            return
        normalized = str(values).strip().lower()
        if normalized in {"1", "y", "yes", "t", "true", "on"}:
            setattr(namespace, self.dest, True)
        elif normalized in {"0", "n", "no", "f", "false", "off"}:
            setattr(namespace, self.dest, False)
        else:
            raise argparse.ArgumentError(self, f"invalid boolean value: {values!r}")


def _configure_logging(log_path: Path, verbose: bool = False) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")
    file_handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=[file_handler, console_handler], force=True)


def _parse_size(text: str) -> Tuple[int, int]:
    try:
        width, height = (int(part) for part in text.lower().split("x"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Size must look like WIDTHxHEIGHT, got {text!r}") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {text!r}")
    return width, height


def _parse_positive(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {text!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {text!r}")
    return value


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LabPBR specular map analyzer, validator and encoder")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file")
    parser.add_argument("--threads", type=_parse_positive, default=config.THREADS, help="Number of worker threads")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser("analyze", help="Decode a specular map and report channel statistics")
    analyze.add_argument("image", type=Path, help="Specular texture to analyse")
    analyze.add_argument("--json", type=Path, default=None, help="Write the report as JSON")
    analyze.add_argument(
        "--previews",
        type=Path,
        nargs="?",
        const=config.PATH_PREVIEWS,
        default=None,
        help="Write grayscale channel previews (default directory: %(const)s)",
    )

    validate = commands.add_parser("validate", help="Validate textures against LabPBR 1.3")
    validate.add_argument("images", type=Path, nargs="+", help="Textures to validate")
    validate.add_argument("--kind", choices=("specular", "normal"), default="specular")
    validate.add_argument("--json", type=Path, default=None, help="Write all results as JSON")

    encode = commands.add_parser("encode", help="Write a uniform specular tile from physical values")
    encode.add_argument("output", type=Path, help="Destination PNG")
    encode.add_argument("--size", type=_parse_size, default=(16, 16), help="Tile size as WIDTHxHEIGHT")
    encode.add_argument("--smoothness", type=float, default=0.0, help="Smoothness percentage")
    green = encode.add_mutually_exclusive_group()
    green.add_argument("--f0", type=float, default=None, help="Dielectric F0 percentage")
    green.add_argument("--ior", type=float, default=None, help="Dielectric index of refraction")
    green.add_argument("--metal", type=str, default=None, help="Predefined metal name (iron, gold, ...)")
    blue = encode.add_mutually_exclusive_group()
    blue.add_argument("--porosity", type=float, default=None, help="Porosity percentage")
    blue.add_argument("--sss", type=float, default=None, help="Subsurface scattering percentage")
    alpha = encode.add_mutually_exclusive_group()
    alpha.add_argument("--emission", type=float, default=0.0, help="Emission percentage")
    alpha.add_argument("--no-emission", dest="disable_emission", action="store_true", help="Write A=255")
    encode.add_argument(
        "--validate",
        nargs="?",
        default=None,
        action=BoolAction,
        help="Validate the written tile (default: from configuration)",
    )
    return parser.parse_args(argv)


def build_runtime_config(args: argparse.Namespace) -> Dict[str, object]:
    overrides: Dict[str, object] = {"THREADS": args.threads}
    if args.log_file is not None:
        overrides["LOG_FILE"] = args.log_file.resolve()
    previews = getattr(args, "previews", None)
    if previews is not None:
        overrides["WRITE_PREVIEWS"] = True
        overrides["PATH_PREVIEWS"] = previews.resolve()
    return config.build_config(overrides)


def _log_issues(source: Path, result) -> None:
    for issue in result.issues:
        LOGGER.log(_ISSUE_LOG_LEVELS[issue.level], "%s: %s", source.name, issue.message)


def run_analyze(args: argparse.Namespace, cfg: Dict[str, object]) -> int:
    from .core.utils_io import load_rgba, save_previews, write_json_report
    from .modules.labpbr import channel_previews, decode_image

    pixels, image_format = load_rgba(args.image)
    height, width = pixels.shape[:2]
    result = decode_image(
        pixels,
        width,
        height,
        workers=cfg["THREADS"],
        rows_per_partition=cfg["ROWS_PER_PARTITION"],
    )

    LOGGER.info("%s (%s, %dx%d)", args.image.name, image_format, width, height)
    if result.avg_red_pct is not None:
        LOGGER.info("Smoothness: %.1f%% average", result.avg_red_pct)
    LOGGER.info(
        "Green: %.1f%% F0 region, %.1f%% metal codes",
        result.green_f0_coverage_pct,
        result.green_metal_coverage_pct,
    )
    if result.closest_material is not None:
        LOGGER.info(
            "Closest material: %s (%s), encoded difference %.2f",
            result.closest_material.material.name,
            result.closest_material.material.category,
            result.closest_material.difference,
        )
    if result.top_metal_code is not None:
        LOGGER.info("Most frequent metal code: %d (%s)", result.top_metal_code, result.top_metal_name or "reserved")
    LOGGER.info("Blue: %.1f%% porosity, %.1f%% SSS", result.porosity_coverage_pct, result.sss_coverage_pct)
    if result.avg_emission_pct is not None:
        LOGGER.info("Emission: %.1f%% average", result.avg_emission_pct)

    if args.json is not None:
        report = dict(result.as_dict(), source=str(args.image), format=image_format)
        write_json_report(report, args.json)
        LOGGER.info("Report written to %s", args.json)

    if cfg["WRITE_PREVIEWS"]:
        previews = channel_previews(pixels, width, height)
        written = save_previews(
            previews,
            Path(cfg["PATH_PREVIEWS"]),
            args.image.stem,
            channels=cfg["CODEC"]["preview_channels"],
        )
        LOGGER.info("Wrote %d channel previews to %s", len(written), cfg["PATH_PREVIEWS"])
    return 0


def run_validate(args: argparse.Namespace, cfg: Dict[str, object]) -> int:
    from .core.utils_io import write_json_report
    from .modules.labpbr import validate_texture_file

    reports = {}
    all_valid = True
    for image in args.images:
        result = validate_texture_file(image, kind=args.kind)
        _log_issues(image, result)
        LOGGER.info("%s: %s", image.name, "valid" if result.is_valid else "INVALID")
        all_valid = all_valid and result.is_valid
        reports[str(image)] = result.as_dict()

    if args.json is not None:
        write_json_report(reports, args.json)
    return 0 if all_valid else 1


def run_encode(args: argparse.Namespace, cfg: Dict[str, object]) -> int:
    from .core.utils_io import atomic_save
    from .modules.labpbr import encoding, validate_specular

    try:
        red = encoding.encode_smoothness(args.smoothness)
        if args.metal is not None:
            green = encoding.encode_metal(args.metal)
        elif args.ior is not None:
            green = encoding.encode_ior(args.ior)
        else:
            green = encoding.encode_f0_percent(args.f0 if args.f0 is not None else 0.0)
        if args.sss is not None:
            blue = encoding.encode_sss(args.sss)
        else:
            blue = encoding.encode_porosity(args.porosity if args.porosity is not None else 0.0)
        alpha = encoding.encode_emission(args.emission, disabled=args.disable_emission)
    except ValueError as exc:
        LOGGER.error("Cannot encode tile: %s", exc)
        return 2

    width, height = args.size
    buffer = encoding.fill_buffer((red, green, blue, alpha), width, height)
    atomic_save(buffer, args.output)
    LOGGER.info("Wrote %dx%d tile (R=%d G=%d B=%d A=%d) to %s", width, height, red, green, blue, alpha, args.output)

    should_validate = args.validate if args.validate is not None else cfg["CODEC"]["validate_after_encode"]
    if should_validate:
        result = validate_specular(buffer, width, height, image_format="PNG")
        _log_issues(args.output, result)
        return 0 if result.is_valid else 1
    return 0


_COMMANDS = {
    "analyze": run_analyze,
    "validate": run_validate,
    "encode": run_encode,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    cfg = build_runtime_config(args)
    _configure_logging(Path(cfg["LOG_FILE"]), verbose=args.verbose)
    LOGGER.debug("Resolved configuration: %s", cfg)
    try:
        from .modules import labpbr  # noqa: F401
    except ModuleNotFoundError as exc:  # pragma: no cover - dependency guard
        raise SystemExit("labpbr_pipeline requires NumPy and Pillow. Install them before running the codec.") from exc
    return _COMMANDS[args.command](args, cfg)


if __name__ == "__main__":
    raise SystemExit(main())
