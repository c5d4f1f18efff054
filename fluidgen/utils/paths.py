"""
Utility that

1. Loads `config.yaml` (or the file named by ``$FLUIDGEN_CONFIG``)
2. Expands environment variables like  ${HOME}
3. Converts any top‑level value that looks like an absolute path into
   `pathlib.Path`
4. Exposes a frozen `FGConfig` dataclass + two convenience Path objects.

All other modules import *only* from this file, never from `yaml` directly
→ a single point of maintenance when new parameters are added.
"""
from __future__ import annotations
import copy
import logging
import os
import re
import yaml
from dataclasses import dataclass
from pathlib import Path

from ..errors import ConfigNotFound

_log = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_VAR = "FLUIDGEN_CONFIG"

# Production run: 512³ cube, 20 steps.
DEFAULTS: dict = {
    "project_root": str(PROJECT_ROOT),
    "data_dir": str(PROJECT_ROOT / "data"),
    "grid": {
        "size": 512,
        "dimension_step": 0.1,       # world units per voxel
    },
    "solver": {
        "diffusion": 0.001,
        "viscosity": 0.01,
        "dt": 0.05,
        "iterations": 8,
        "steps": 20,
    },
    "seeding": {
        "height_base": 30.0,
        "height_diff": 10.0,
        "density_base": 100.0,
        "density_range": 50.0,
        "height_seed": 12345,
        "density_seed": 123,
        "curl_seed": 1654987,
        "curl_strength": 1.0,
    },
    "scene": {
        "floor_height": 7.5,         # world units
        "floor_density": 255.0,
        "cube_size": 20.0,           # world units
        "cube_position": [70.0, 70.0],  # grid cells
    },
    "output": {
        "subdir": "volumes",
        "file_name": "fluid_simulation_{size}.raw",
    },
}


@dataclass(slots=True, frozen=True)
class FGConfig:
    project_root: Path
    data_dir:     Path
    grid:         dict
    solver:       dict
    seeding:      dict
    scene:        dict
    output:       dict

    def output_path(self) -> Path:
        """Default location of the raw volume for this configuration."""
        name = self.output["file_name"].format(size=self.grid["size"])
        return self.data_dir / self.output["subdir"] / name


ABS_WIN = re.compile(r"^[A-Za-z]:[\\/].*")   # e.g. C:\ or D:/


def _looks_like_path(val: str) -> bool:
    return val.startswith("/") or bool(ABS_WIN.match(val))


def _merge(base: dict, override: dict) -> dict:
    "Recursively overlay *override* on a deep copy of *base*."
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(cfg_path: str | Path | None = None, **overrides) -> FGConfig:
    """
    Parse YAML then cast any top‑level value that *looks* like an absolute
    path (Unix or Windows drive letter) into pathlib.Path.
    Environment variables are expanded beforehand.

    Missing keys fall back to `DEFAULTS`; keyword *overrides* are merged
    last, section by section.  Only the implicit ``<project>/config.yaml``
    may be absent; a path given as *cfg_path* or via ``$FLUIDGEN_CONFIG``
    must exist, otherwise `ConfigNotFound` is raised.
    """
    explicit = cfg_path or os.environ.get(ENV_VAR)
    cfg_path = Path(explicit or PROJECT_ROOT / "config.yaml")
    if explicit and not cfg_path.is_file():
        raise ConfigNotFound(f"config file not found: {cfg_path}")
    if cfg_path.exists():
        text = os.path.expandvars(cfg_path.read_text())
        cfg = _merge(DEFAULTS, yaml.safe_load(text) or {})
    else:
        _log.debug("No config at %s – using built‑in defaults.", cfg_path)
        cfg = copy.deepcopy(DEFAULTS)
    cfg = _merge(cfg, overrides)

    unknown = set(cfg) - set(FGConfig.__slots__)
    if unknown:
        raise ValueError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    for k, v in cfg.items():
        if isinstance(v, str):
            v = os.path.expanduser(v)
            cfg[k] = Path(v) if _looks_like_path(v) else v

    # data_dir may be given relative to the project root
    cfg["project_root"] = Path(cfg["project_root"])
    data_dir = Path(cfg["data_dir"])
    cfg["data_dir"] = data_dir if data_dir.is_absolute() else cfg["project_root"] / data_dir

    return FGConfig(**cfg)


# ── Instantiate and materialise the folders once at import time ────────────
conf      = load_config()
DATA_D    = conf.data_dir
VOLUMES_D = DATA_D / conf.output["subdir"]

for d in (DATA_D, VOLUMES_D):
    d.mkdir(parents=True, exist_ok=True)
