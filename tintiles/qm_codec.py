"""Scalar encodings used by the quantized-mesh terrain format."""

from __future__ import annotations

import math
from typing import Sequence

# Largest quantized coordinate; coordinates span 0..QUANTIZED_COORDINATE_SIZE.
QUANTIZED_COORDINATE_SIZE = 32767

_INT16_MIN = -32768
_INT16_MAX = 32767
_UINT16_MAX = 0xFFFF

# WGS84 ellipsoid, shared by web mercator (EPSG:3857) and ECEF (EPSG:4978).
WGS84_SEMI_MAJOR_AXIS = 6378137.0
WGS84_FLATTENING = 1.0 / 298.257223563
_WGS84_E2 = WGS84_FLATTENING * (2.0 - WGS84_FLATTENING)


def zig_zag_encode(value: int) -> int:
    """Map a signed 16-bit integer to an unsigned one, small magnitudes first."""
    if not _INT16_MIN <= value <= _INT16_MAX:
        raise ValueError(f"{value} does not fit in a signed 16-bit integer")
    return ((value << 1) ^ (value >> 15)) & _UINT16_MAX


def zig_zag_decode(value: int) -> int:
    """Inverse of :func:`zig_zag_encode`."""
    if not 0 <= value <= _UINT16_MAX:
        raise ValueError(f"{value} does not fit in an unsigned 16-bit integer")
    return (value >> 1) ^ -(value & 1)


def quantize_coordinate(value: float, lo: float, hi: float) -> int:
    """Scale ``value`` from ``[lo, hi]`` onto ``0..QUANTIZED_COORDINATE_SIZE``.

    A degenerate range (``lo == hi``) quantizes to 0.
    """
    if hi < lo:
        raise ValueError(f"invalid range [{lo}, {hi}]")
    if not lo <= value <= hi:
        raise ValueError(f"{value} lies outside [{lo}, {hi}]")
    delta = hi - lo
    if delta == 0:
        return 0
    return int((value - lo) / delta * QUANTIZED_COORDINATE_SIZE)


def dequantize_coordinate(value: int, lo: float, hi: float) -> float:
    """Map a quantized coordinate back into ``[lo, hi]``."""
    if hi < lo:
        raise ValueError(f"invalid range [{lo}, {hi}]")
    return lo + value / QUANTIZED_COORDINATE_SIZE * (hi - lo)


def mercator_to_ecef(x: float, y: float, z: float) -> tuple[float, float, float]:
    """Convert a web-mercator point with height in metres to earth-centred coordinates."""
    lon = x / WGS84_SEMI_MAJOR_AXIS
    lat = math.atan(math.sinh(y / WGS84_SEMI_MAJOR_AXIS))
    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)
    n = WGS84_SEMI_MAJOR_AXIS / math.sqrt(1.0 - _WGS84_E2 * sin_lat * sin_lat)
    return (
        (n + z) * cos_lat * math.cos(lon),
        (n + z) * cos_lat * math.sin(lon),
        (n * (1.0 - _WGS84_E2) + z) * sin_lat,
    )


def oct_encode(normal: Sequence[float]) -> tuple[int, int]:
    """Encode a normal vector as two bytes using octahedral projection."""
    nx, ny, nz = (float(c) for c in normal)
    norm1 = abs(nx) + abs(ny) + abs(nz)
    if norm1 == 0:
        raise ValueError("cannot encode a zero-length normal")
    px = nx / norm1
    py = ny / norm1
    if nz <= 0.0:
        sign_x = 1.0 if nx >= 0 else -1.0
        sign_y = 1.0 if ny > 0 else -1.0
        ox = (1.0 - abs(py)) * sign_x
        oy = (1.0 - abs(px)) * sign_y
    else:
        ox, oy = px, py
    ox = (ox + 1.0) / 2.0
    oy = (oy + 1.0) / 2.0
    return int(ox * 255), int(oy * 255)