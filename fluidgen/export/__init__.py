"""
Output of the finished density field as a headerless N³ byte volume.
"""
from .volume import (compute_density_range, quantize, volume_bytes,
                     write_volume, export_density)

__all__ = ["compute_density_range", "quantize", "volume_bytes",
           "write_volume", "export_density"]
