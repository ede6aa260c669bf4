"""
Field Sketches - Entry Point

Usage:
    python -m field_sketches [preset] [--size WxH] [--window WxH]
                             [--seed N] [--snap N] [--verbose]

Examples:
    python -m field_sketches
    python -m field_sketches life
    python -m field_sketches ripple --size 320x240 --window 960x720
    python -m field_sketches all --snap 120

Sketches:
    marching    - Noise field contoured with marching squares
    life        - Game of Life and B/S variants on a wrapped grid
    flow        - Noise flow field drawn as strokes
    ripple      - Damped water ripples from rain and fish

Use --list to see all available presets.
"""

import logging
import os
import sys

from .presets import PRESET_ORDER, SKETCH_ORDER, list_presets


def _parse_size(text):
    parts = text.lower().split("x")
    return int(parts[0]), int(parts[1])


def snap(preset, width, height, frames, seed=None, out_dir=None):
    """Headless mode: run N frames per preset, save a PNG each, exit."""
    from PIL import Image

    from .simulator import SketchSimulator

    screenshots_dir = out_dir or os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "screenshots"
    )
    os.makedirs(screenshots_dir, exist_ok=True)

    presets_to_snap = [preset] if preset != "all" else PRESET_ORDER
    written = []
    for pkey in presets_to_snap:
        print(f"  {pkey}: running {frames} frames...", end="", flush=True)
        sim = SketchSimulator(pkey, width, height, seed=seed)
        rgb = sim.run(frames, dt=1 / 60)

        img = Image.fromarray(rgb)
        path = os.path.join(screenshots_dir, f"fs_{pkey}.png")
        img.save(path)
        img.save(os.path.join(screenshots_dir, "latest.png"))
        print(f" saved: {path}")
        written.append(path)
    return written


def main(argv=None):
    preset = "isolines"
    sim_size = None
    win_w, win_h = 900, 900
    snap_frames = 0
    seed = None

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--size" and i + 1 < len(args):
            sim_size = _parse_size(args[i + 1])
            i += 2
        elif arg == "--window" and i + 1 < len(args):
            win_w, win_h = _parse_size(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_frames = int(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg in ("--verbose", "-v"):
            logging.basicConfig(level=logging.DEBUG,
                                format="%(asctime)s %(name)s %(levelname)s: %(message)s")
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:")
            for sketch in SKETCH_ORDER:
                print(f"\n  [{sketch}]")
                for key, name, desc in list_presets(sketch):
                    print(f"    {key:16s} {name:20s} {desc}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PRESET_ORDER or arg == "all":
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return 2

    if snap_frames > 0:
        w, h = sim_size or (win_w, win_h)
        print(f"Headless snap mode: {preset} @ {w}x{h}, {snap_frames} frames")
        snap(preset, w, h, snap_frames, seed=seed)
        return 0

    if preset == "all":
        preset = PRESET_ORDER[0]

    print("Starting Field Sketches Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    from .viewer import Viewer

    sim_w, sim_h = sim_size or (None, None)
    viewer = Viewer(
        width=win_w,
        height=win_h,
        sim_width=sim_w,
        sim_height=sim_h,
        start_preset=preset,
        seed=seed,
    )
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
