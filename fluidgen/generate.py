"""
Fluid volume generator
======================

End‑to‑end batch run:

1. density field  ➜ seed the grid
2. curl‑noise velocity field ➜ seed the grid
3. `steps` solver steps
4. paint floor slab + cube
5. quantise and write  <data_dir>/volumes/fluid_simulation_<N>.raw

    python -m fluidgen.generate --size 64 --steps 5
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .errors import FluidGenError
from .export import export_density
from .noise import CurlNoiseGenerator, DensityGenerator
from .simulators import FluidSimulation, add_cube_on_floor, set_floor
from .utils.paths import FGConfig, load_config

_log = logging.getLogger(__name__)


def run(conf: FGConfig, output: str | Path | None = None) -> Path:
    """Generate one volume for *conf*; returns the path written."""
    sim = FluidSimulation.from_config(conf)

    sim.grid.load_density(DensityGenerator.from_config(conf).field())
    _log.info("Starting setting up environment")
    sim.grid.load_velocity(*CurlNoiseGenerator.from_config(conf).field())
    _log.info("Finished setting up environment")

    sim.run(conf.solver["steps"])

    scene, step = conf.scene, conf.grid["dimension_step"]
    _log.info("Generate fluid floor")
    set_floor(sim.grid, scene["floor_height"] / step, scene["floor_density"])
    _log.info("Generate cube")
    pos_x, pos_y = scene["cube_position"]
    add_cube_on_floor(sim.grid, scene["cube_size"] / step,
                      scene["floor_height"] / step, pos_x, pos_y,
                      scene["floor_density"])

    out = export_density(sim, output or conf.output_path(), scene["floor_density"])
    _log.info("Finished writing densities to file. All done!")
    return out


def _parse_args(argv):
    ap = argparse.ArgumentParser(prog="fluidgen",
                                 description="Generate a raw fluid density volume.")
    ap.add_argument("--config", type=Path, default=None,
                    help="YAML config (default: $FLUIDGEN_CONFIG or ./config.yaml)")
    ap.add_argument("--size", type=int, default=None, help="grid resolution N")
    ap.add_argument("--steps", type=int, default=None, help="number of solver steps")
    ap.add_argument("--output", type=Path, default=None, help="output .raw file")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s: %(message)s",
    )
    overrides = {}
    if args.size is not None:
        overrides["grid"] = {"size": args.size}
    if args.steps is not None:
        overrides["solver"] = {"steps": args.steps}

    try:
        conf = load_config(args.config, **overrides)
        out = run(conf, args.output)
    except FluidGenError as exc:
        _log.error("Generation failed: %s", exc)
        return 1
    print("✓ volume:", out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
