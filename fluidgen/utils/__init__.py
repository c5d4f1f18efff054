"""
Expose the resolved config and folders so downstream code can do:

    from fluidgen.utils import conf, VOLUMES_D
"""
from .paths import conf, load_config, FGConfig, DATA_D, VOLUMES_D

__all__ = ["conf", "load_config", "FGConfig", "DATA_D", "VOLUMES_D"]
