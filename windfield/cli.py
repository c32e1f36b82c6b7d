#!/usr/bin/env python
"""
Command-line interface for wind field rendering.

This module provides a CLI for rendering wind heatmap/particle frames,
animations and packed wind textures from observation files.

Usage:
    python -m windfield.cli --demo
    python -m windfield.cli --observations winds.json --lat 35.2 --lon -75.6 --zoom 8
    python -m windfield.cli --demo --format gif --frames 90 --theme holographic
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from config.settings import PRESET_VIEWPORTS, get_settings
from windfield.data.loader import generate_demo_observations, load_observations
from windfield.data.models import LatLng, Viewport, WindObservation
from windfield.data.processor import get_unit_label
from windfield.data.projection import viewport_bounds
from windfield.exceptions import WindFieldError
from windfield.visualization.animation import WindAnimation, render_still
from windfield.visualization.styles import get_style
from windfield.visualization.texture import generate_wind_texture

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Render wind speed heatmaps and animated wind particles.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render a still frame from synthetic data
  python -m windfield.cli --demo

  # Render observations from a file around a custom center
  python -m windfield.cli --observations winds.json --lat 35.2 --lon -75.6 --zoom 8

  # Animated GIF in the holographic theme
  python -m windfield.cli --demo --format gif --frames 90 --theme holographic

  # Packed u/v texture for GPU layers
  python -m windfield.cli --demo --format texture
        """
    )

    # Input arguments
    input_group = parser.add_argument_group('Input')
    input_group.add_argument(
        '--observations',
        type=Path,
        default=None,
        help='JSON or CSV file with wind observations'
    )
    input_group.add_argument(
        '--units',
        type=str,
        choices=['knots', 'kts', 'mph', 'm/s', 'km/h', 'kph'],
        default='knots',
        help='Speed units used in the observation file. Default: knots'
    )
    input_group.add_argument(
        '--demo',
        action='store_true',
        help='Use a synthetic wind field instead of an observation file'
    )

    # Viewport arguments
    view_group = parser.add_argument_group('Viewport')
    view_group.add_argument(
        '--preset',
        type=str,
        choices=list(PRESET_VIEWPORTS.keys()),
        default='outer_banks',
        help='Preset map view. Ignored if --lat and --lon are provided.'
    )
    view_group.add_argument('--lat', type=float, default=None, help='Center latitude')
    view_group.add_argument('--lon', type=float, default=None, help='Center longitude')
    view_group.add_argument('--zoom', type=float, default=None, help='Zoom level')
    view_group.add_argument('--width', type=int, default=800, help='Image width in pixels. Default: 800')
    view_group.add_argument('--height', type=int, default=600, help='Image height in pixels. Default: 600')
    view_group.add_argument(
        '--rotation',
        type=float,
        default=0.0,
        help='Map rotation in degrees (clockwise). Default: 0'
    )

    # Output arguments
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '--format',
        type=str,
        choices=['png', 'gif', 'texture', 'all'],
        default='png',
        help='Output format(s) to generate. Default: png'
    )
    output_group.add_argument(
        '--output-dir',
        type=Path,
        default=None,
        help='Output directory for generated files. Default: settings output_dir'
    )
    output_group.add_argument(
        '--frames',
        type=int,
        default=120,
        help='Frames to animate (gif) or warm up before the still (png). Default: 120'
    )
    output_group.add_argument('--fps', type=int, default=None, help='GIF frames per second')
    output_group.add_argument(
        '--theme',
        type=str,
        choices=['standard', 'holographic'],
        default=None,
        help='Render style. Default: settings default_theme'
    )
    output_group.add_argument('--seed', type=int, default=None, help='Seed for particles and demo data')
    output_group.add_argument(
        '--legend',
        action='store_true',
        help='Add a speed colorbar and title to the PNG'
    )
    output_group.add_argument(
        '--texture-resolution',
        type=int,
        default=64,
        help='Texture pixels per axis. Default: 64'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def build_viewport(args: argparse.Namespace) -> Viewport:
    """Viewport from explicit center/zoom arguments or a preset."""
    preset = PRESET_VIEWPORTS[args.preset]
    lat = args.lat if args.lat is not None else preset["latitude"]
    lon = args.lon if args.lon is not None else preset["longitude"]
    zoom = args.zoom if args.zoom is not None else preset["zoom"]
    return Viewport(
        center=LatLng(latitude=lat, longitude=lon),
        zoom=zoom,
        width=args.width,
        height=args.height,
        rotation=math.radians(args.rotation),
    )


def write_texture(
    observations: List[WindObservation],
    viewport: Viewport,
    output_dir: Path,
    resolution: int,
) -> Optional[Path]:
    """
    Write the packed wind texture for the viewport's bounds.

    Saves <output_dir>/wind_texture.png plus a JSON sidecar with the decode
    ranges and bounds. West/east are unwrapped, so east can exceed 180 for
    a view across the antimeridian. Returns None when there are no
    observations.
    """
    south, north, west, east = viewport_bounds(viewport)
    texture = generate_wind_texture(
        observations,
        south=south,
        north=north,
        west=west,
        east=east,
        resolution=resolution,
    )
    if texture is None:
        logger.warning("No observations - texture not written")
        return None

    png_path = output_dir / "wind_texture.png"
    png_path.write_bytes(texture.png_bytes)

    meta = {
        "u_min": texture.u_min, "u_max": texture.u_max,
        "v_min": texture.v_min, "v_max": texture.v_max,
        "width": texture.width, "height": texture.height,
        "south": texture.south, "north": texture.north,
        "west": texture.west, "east": texture.east,
    }
    with open(output_dir / "wind_texture.json", "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)
    return png_path


def run_render(
    observations: List[WindObservation],
    viewport: Viewport,
    output_dir: Path,
    output_format: str = 'png',
    frames: int = 120,
    fps: Optional[int] = None,
    theme: Optional[str] = None,
    seed: Optional[int] = None,
    show_legend: bool = False,
    texture_resolution: int = 64,
) -> dict:
    """
    Render the requested outputs.

    Args:
        observations: Wind observations
        viewport: Map viewport
        output_dir: Directory for output files
        output_format: 'png', 'gif', 'texture' or 'all'
        frames: Animation length, or warm-up frames for the still
        fps: GIF frame rate
        theme: Render style name (settings default if None)
        seed: Particle seed
        show_legend: Whether the still gets a colorbar and title
        texture_resolution: Texture pixels per axis

    Returns:
        Dictionary with paths to generated files
    """
    settings = get_settings()
    output_dir.mkdir(parents=True, exist_ok=True)
    style = get_style(theme or settings.default_theme)

    if not observations:
        logger.warning("No observations - the wind layers will be empty")

    results = {}

    if output_format in ['png', 'all']:
        logger.info("Rendering still frame (PNG)...")
        png_path, stats = render_still(
            observations,
            viewport,
            output_dir / "wind_field.png",
            warmup_frames=frames,
            settings=settings,
            style=style,
            seed=seed,
            show_legend=show_legend,
            title=f"Wind field at {viewport.center} (zoom {viewport.zoom:g})",
        )
        results['png'] = png_path
        logger.info(f"  Saved: {png_path} ({stats.particles_drawn} particles drawn)")

    if output_format in ['gif', 'all']:
        logger.info(f"Rendering {frames}-frame animation (GIF)...")
        with WindAnimation(
            observations, viewport, frames=frames, settings=settings, style=style, seed=seed
        ) as animation:
            gif_path = animation.save_gif(output_dir / "wind_field.gif", fps=fps)
        results['gif'] = gif_path
        logger.info(f"  Saved: {gif_path}")

    if output_format in ['texture', 'all']:
        logger.info("Generating wind texture...")
        texture_path = write_texture(observations, viewport, output_dir, texture_resolution)
        if texture_path is not None:
            results['texture'] = texture_path
            logger.info(f"  Saved: {texture_path}")

    return results


def main(argv: Optional[list] = None) -> int:
    """Main entry point for CLI."""
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = get_settings()

    if args.observations is None and not args.demo:
        logger.error("Provide --observations FILE or --demo")
        return 1
    if args.frames < 1:
        logger.error("--frames must be at least 1")
        return 1

    try:
        viewport = build_viewport(args)
    except ValueError as e:
        logger.error(f"Invalid viewport: {e}")
        return 1

    seed = args.seed if args.seed is not None else settings.default_seed
    if args.output_dir is None:
        settings.ensure_directories()
    output_dir = args.output_dir or settings.output_dir

    try:
        if args.observations is not None:
            observations = load_observations(args.observations, units=args.units)
        else:
            observations = generate_demo_observations(viewport, seed=seed)

        print("=" * 70)
        print("Wind Field Renderer")
        print("=" * 70)
        print(f"\nCenter: {viewport.center}  Zoom: {viewport.zoom:g}")
        print(f"Size: {viewport.width}x{viewport.height}  Rotation: {args.rotation:g}°")
        if args.observations is not None:
            print(f"Observations: {len(observations)} from {args.observations} ({get_unit_label(args.units)})")
        else:
            print(f"Observations: {len(observations)} (demo)")
        print(f"Format: {args.format}")
        print(f"Output Directory: {output_dir}")
        print()

        results = run_render(
            observations,
            viewport,
            output_dir,
            output_format=args.format,
            frames=args.frames,
            fps=args.fps,
            theme=args.theme,
            seed=seed,
            show_legend=args.legend,
            texture_resolution=args.texture_resolution,
        )

        print("\nGenerated files:")
        for fmt, path in results.items():
            print(f"  • {path}")
        return 0

    except WindFieldError as e:
        logger.error(e.message)
        return 1
    except Exception as e:
        logger.error(f"Error rendering wind field: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
