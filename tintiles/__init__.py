"""Quantized-mesh terrain tiles, zoom-level estimates and benchmark statistics."""

__version__ = "0.1.0"