"""Command-line interface for terrain mesh generation."""

import argparse
import logging
import time
from pathlib import Path

import structlog

from .config import TerrainConfig, config_overrides, find_config, load_config
from .exceptions import ConfigurationError


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog console output."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a procedural island terrain mesh"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path or name of a terrain TOML config (default: built-in defaults)",
    )
    parser.add_argument("--size", type=int, default=None, help="Terrain size override")
    parser.add_argument(
        "--simplification", type=int, default=None, help="Mesh simplification override"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed override")
    parser.add_argument("--octaves", type=int, default=None, help="Noise octaves override")
    parser.add_argument(
        "--height-multiplier", type=float, default=None, help="Height multiplier override"
    )
    parser.add_argument(
        "--no-falloff", action="store_true", help="Disable the island falloff mask"
    )
    parser.add_argument(
        "--index32", action="store_true", help="Use 32-bit triangle indices"
    )
    parser.add_argument(
        "--output", "-o", type=str, default=None, help="Save the mesh to this .npz path"
    )
    parser.add_argument(
        "--obj", type=str, default=None, help="Export the mesh as Wavefront OBJ"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate the generated mesh"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def resolve_config(args: argparse.Namespace) -> TerrainConfig:
    """Load the configured TOML file (if any) and apply CLI overrides."""
    config = load_config(find_config(args.config)) if args.config else TerrainConfig()

    overrides: dict[str, object] = {}
    if args.size is not None:
        overrides["terrain_size"] = args.size
    if args.simplification is not None:
        overrides["simplification"] = args.simplification
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.octaves is not None:
        overrides["octaves"] = args.octaves
    if args.height_multiplier is not None:
        overrides["height_multiplier"] = args.height_multiplier
    if args.no_falloff:
        overrides["use_falloff"] = False
    if args.index32:
        overrides["use_32bit_index"] = True

    return config_overrides(config, **overrides) if overrides else config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for terrain mesh generation."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .generator import GenerationPipeline
    from .persistence import export_obj, save_mesh
    from .validation import validate_mesh

    try:
        config = resolve_config(args)
    except FileNotFoundError as e:
        logger.error("config_not_found", error=str(e))
        raise SystemExit(1)

    print(
        f"Generating {config.terrain_size}x{config.terrain_size} terrain "
        f"(simplification {config.simplification}) with seed {config.seed}"
    )

    pipeline = GenerationPipeline()
    start_time = time.time()
    try:
        mesh = pipeline.generate(config)
    except ConfigurationError as e:
        logger.error("invalid_config", error=str(e))
        raise SystemExit(1)
    gen_time = time.time() - start_time

    print(
        f"Generated {mesh.vertex_count:,} vertices, {mesh.triangle_count:,} triangles "
        f"in {gen_time:.2f}s"
    )

    if args.validate:
        result = validate_mesh(mesh)
        if not result.passed:
            raise SystemExit(1)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        save_mesh(output_path, mesh, config)
        print(f"Saved to {output_path}")

    if args.obj:
        obj_path = Path(args.obj)
        obj_path.parent.mkdir(parents=True, exist_ok=True)
        export_obj(obj_path, mesh, centered=True)
        print(f"Exported OBJ to {obj_path}")


if __name__ == "__main__":
    main()
