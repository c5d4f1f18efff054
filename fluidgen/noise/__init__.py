"""
Procedural seed fields.

• perlin.PerlinNoise            – gradient noise primitive
• density.DensityGenerator      – initial density below a noisy surface
• curl.CurlNoiseGenerator       – divergence‑free initial velocity
"""
from .perlin import PerlinNoise
from .density import DensityGenerator, Surface
from .curl import CurlNoiseGenerator

__all__ = ["PerlinNoise", "DensityGenerator", "Surface", "CurlNoiseGenerator"]
