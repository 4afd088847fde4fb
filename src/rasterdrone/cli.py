"""
Command-line interface for rasterdrone.

Provides commands for converting an image to a light layout and for writing
a default configuration file.
"""

import argparse
import os
import sys

from rasterdrone.config import load_config, save_default_config
from rasterdrone.tracer import configure_tracer, get_tracer


def build_parser():
    parser = argparse.ArgumentParser(
        description="rasterdrone: convert an image into evenly spread light coordinates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Extract and sample coordinates from an image")
    run_parser.add_argument("--input", "-i", required=True, help="Input image file")
    run_parser.add_argument("--out", "-o", required=True, help="Output directory")
    run_parser.add_argument("--config", "-c", default=None, help="Path to YAML configuration file")
    run_parser.add_argument(
        "--strategy",
        choices=["farthest", "grid"],
        default=None,
        help="Override the sampling strategy",
    )
    run_parser.add_argument("--count", type=int, default=None, help="Override sample count (inputs this small skip sampling)")
    run_parser.add_argument("--cell-size", type=int, default=None, help="Override grid cell size")
    run_parser.add_argument("--percentile", type=float, default=None, help="Override brightness percentile")
    run_parser.add_argument(
        "--physical-size",
        type=float,
        default=None,
        help="Also write normalized.csv scaled so the longer axis spans this many units",
    )
    run_parser.add_argument("--preview", action="store_true", help="Write preview.png of the sampled points")
    run_parser.add_argument("--trace", action="store_true", help="Enable runtime tracing")
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument("--trace-file", default=None, help="Path to write trace logs")
    run_parser.add_argument("--trace-json", action="store_true", help="Enable JSON trace output")

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="rasterdrone_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def _apply_overrides(config, args):
    if args.strategy is not None:
        config.sampling.strategy = args.strategy
    if args.count is not None:
        config.sampling.count = args.count
    if args.cell_size is not None:
        config.sampling.cell_size = args.cell_size
    if args.percentile is not None:
        config.preprocessing.percentile = args.percentile
    if args.physical_size is not None:
        config.export.physical_size = args.physical_size
    if args.preview:
        config.export.preview = True
    return config


def handle_run(args):
    """Handle the run command."""
    config = _apply_overrides(load_config(args.config), args)

    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )
    tracer = get_tracer()

    try:
        from rasterdrone.export.normalize import normalize_coordinates
        from rasterdrone.io.load_image import load_image, validate_image_input
        from rasterdrone.io.save_artifacts import (
            ensure_dir,
            save_coordinates_csv,
            save_image,
            save_json,
        )
        from rasterdrone.models import DegenerateCoordinatesError, coordinates_to_array
        from rasterdrone.orchestrator import PipelineOrchestrator
        from rasterdrone.render.raster import coordinates_to_image

        errors = validate_image_input(args.input)
        if errors:
            raise ValueError(f"Input validation failed: {errors}")

        with tracer.span("cli_run", module="cli"):
            image, meta = load_image(args.input)

            orchestrator = PipelineOrchestrator(
                preprocessing_params=config.preprocessing.to_params(),
                sampling_params=config.sampling.to_params(),
            )
            orchestrator.load_image(image)
            final = orchestrator.evaluate()
            intermediate = orchestrator.intermediate

            ensure_dir(args.out)
            save_coordinates_csv(coordinates_to_array(final), os.path.join(args.out, "coordinates.csv"))

            outputs = ["coordinates.csv"]
            physical_size = config.export.physical_size
            if physical_size:
                try:
                    normalized = normalize_coordinates(final, physical_size)
                    save_coordinates_csv(normalized, os.path.join(args.out, "normalized.csv"), precision=6)
                    outputs.append("normalized.csv")
                except DegenerateCoordinatesError as e:
                    tracer.event(f"Skipping normalized export: {e}", level="WARN")
                    print(f"[!] Skipping normalized.csv: {e}", file=sys.stderr)

            if config.export.preview:
                preview = coordinates_to_image(intermediate.width, intermediate.height, final)
                save_image(preview, os.path.join(args.out, "preview.png"))
                outputs.append("preview.png")

            summary = {
                "source": meta,
                "processed_width": intermediate.width,
                "processed_height": intermediate.height,
                "candidate_count": len(intermediate),
                "sampled_count": len(final),
                "sampling": config.sampling.strategy,
            }
            save_json(summary, os.path.join(args.out, "summary.json"))
            outputs.append("summary.json")

        print("\nPipeline completed successfully.")
        print(f"  Candidate coordinates: {len(intermediate)}")
        print(f"  Sampled coordinates: {len(final)}")
        print(f"\nOutputs saved to: {args.out}/")
        for name in outputs:
            print(f"  - {name}")

        return 0

    except Exception as e:
        tracer.event(f"Pipeline failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        tracer.config.close()


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
