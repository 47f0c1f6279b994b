"""Reading and writing terrain meshes in the quantized-mesh tile format."""

from __future__ import annotations

import logging
import math
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Sequence

from tintiles.qm_codec import (
    QUANTIZED_COORDINATE_SIZE,
    dequantize_coordinate,
    mercator_to_ecef,
    oct_encode,
    quantize_coordinate,
    zig_zag_decode,
    zig_zag_encode,
)

log = logging.getLogger(__name__)

Vertex = tuple[float, float, float]
Face = tuple[int, int, int]

_HEADER = struct.Struct("<3d2f4d3d")
_UINT32 = struct.Struct("<I")
_PADDING_BYTE = 0xCA
_EXTENSION_NORMALS = 1
_MAX_16BIT_VERTICES = 65536


@dataclass(frozen=True)
class BBox3D:
    """An axis-aligned box given by its minimum and maximum corners."""

    min: Vertex
    max: Vertex


@dataclass(frozen=True)
class QuantizedMeshHeader:
    """The fixed-size header that starts every quantized-mesh tile."""

    center: Vertex
    minimum_height: float
    maximum_height: float
    bounding_sphere_center: Vertex
    bounding_sphere_radius: float
    horizon_occlusion: Vertex


def _vertex(values: Sequence[float]) -> Vertex:
    x, y, z = (float(v) for v in values)
    return (x, y, z)


def _bbox_of(triangles: Iterable[Sequence[Vertex]]) -> BBox3D:
    points = [v for tri in triangles for v in tri]
    if not points:
        raise ValueError("cannot derive a bounding box from an empty mesh")
    xs, ys, zs = zip(*points)
    return BBox3D((min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs)))


def _pack_header(header: QuantizedMeshHeader) -> bytes:
    return _HEADER.pack(
        *header.center,
        header.minimum_height,
        header.maximum_height,
        *header.bounding_sphere_center,
        header.bounding_sphere_radius,
        *header.horizon_occlusion,
    )


def _unpack_header(data: bytes) -> QuantizedMeshHeader:
    values = _HEADER.unpack(data)
    return QuantizedMeshHeader(
        center=values[0:3],
        minimum_height=values[3],
        maximum_height=values[4],
        bounding_sphere_center=values[5:8],
        bounding_sphere_radius=values[8],
        horizon_occlusion=values[9:12],
    )


class _Writer:
    """Writes to a binary stream and tracks the offset from where it started."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.pos = 0

    def write(self, data: bytes) -> None:
        self._stream.write(data)
        self.pos += len(data)

    def uint32(self, value: int) -> None:
        self.write(_UINT32.pack(value))

    def array(self, code: str, values: Sequence[int]) -> None:
        self.write(struct.pack(f"<{len(values)}{code}", *values))

    def align(self, alignment: int) -> None:
        remainder = self.pos % alignment
        if remainder:
            self.write(bytes([_PADDING_BYTE]) * (alignment - remainder))


class _Reader:
    """Reads exact byte counts from a binary stream, tracking the offset."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.pos = 0

    def read(self, size: int, what: str) -> bytes:
        data = self._stream.read(size)
        if len(data) != size:
            raise ValueError(
                f"unexpected end of data at offset {self.pos} while reading {what}"
            )
        self.pos += size
        return data

    def uint32(self, what: str) -> int:
        return _UINT32.unpack(self.read(_UINT32.size, what))[0]

    def array(self, code: str, count: int, what: str) -> list[int]:
        size = struct.calcsize(f"<{code}") * count
        return list(struct.unpack(f"<{count}{code}", self.read(size, what)))


def _scale_rescaled(value: float) -> int:
    scaled = int(value * QUANTIZED_COORDINATE_SIZE)
    if not 0 <= scaled <= QUANTIZED_COORDINATE_SIZE:
        raise ValueError(f"rescaled coordinate {value} lies outside [0, 1]")
    return scaled


def _quantize(vertex: Vertex, bbox: BBox3D, mesh_is_rescaled: bool) -> tuple[int, int, int]:
    if mesh_is_rescaled:
        u, v, h = (_scale_rescaled(c) for c in vertex)
        return u, v, h
    u, v, h = (
        quantize_coordinate(c, lo, hi) for c, lo, hi in zip(vertex, bbox.min, bbox.max)
    )
    return u, v, h


def write_quantized_mesh(
    stream: BinaryIO,
    triangles: Iterable[Sequence[Sequence[float]]],
    bbox: BBox3D | None = None,
    normals: Sequence[Sequence[float]] | None = None,
    mesh_is_rescaled: bool = False,
) -> QuantizedMeshHeader:
    """Write triangles (in web-mercator metres) as a quantized-mesh tile.

    Vertices are quantized against ``bbox`` (derived from the triangles when
    omitted), or taken as already scaled to ``[0, 1]`` when
    ``mesh_is_rescaled`` is set. Per-vertex ``normals`` are appended as the
    oct-encoded normals extension. Returns the header that was written.
    """
    tris: list[tuple[Vertex, Vertex, Vertex]] = []
    for tri in triangles:
        corners = tuple(_vertex(v) for v in tri)
        if len(corners) != 3:
            raise ValueError("every triangle needs exactly three vertices")
        tris.append(corners)  # type: ignore[arg-type]

    if bbox is None:
        bbox = _bbox_of(tris)

    out = _Writer(stream)

    mid = tuple((lo + hi) / 2.0 for lo, hi in zip(bbox.min, bbox.max))
    center = mercator_to_ecef(*mid)
    header = QuantizedMeshHeader(
        center=center,
        minimum_height=bbox.min[2],
        maximum_height=bbox.max[2],
        bounding_sphere_center=center,
        bounding_sphere_radius=math.hypot(
            bbox.max[0] - bbox.min[0], bbox.max[1] - bbox.min[1]
        ),
        horizon_occlusion=(center[0], center[1], bbox.max[2]),
    )
    out.write(_pack_header(header))

    order: dict[Vertex, int] = {}
    us: list[int] = []
    vs: list[int] = []
    hs: list[int] = []
    west: list[int] = []
    east: list[int] = []
    north: list[int] = []
    south: list[int] = []
    prev_u = prev_v = prev_h = 0

    for tri in tris:
        for node in tri:
            if node in order:
                continue
            index = len(order)
            order[node] = index
            u, v, h = _quantize(node, bbox, mesh_is_rescaled)

            if u == 0:
                west.append(index)
            elif u == QUANTIZED_COORDINATE_SIZE:
                east.append(index)
            if v == 0:
                north.append(index)
            elif v == QUANTIZED_COORDINATE_SIZE:
                south.append(index)

            us.append(zig_zag_encode(u - prev_u))
            vs.append(zig_zag_encode(v - prev_v))
            hs.append(zig_zag_encode(h - prev_h))
            prev_u, prev_v, prev_h = u, v, h

    nvertices = len(us)
    out.uint32(nvertices)
    out.array("H", us)
    out.array("H", vs)
    out.array("H", hs)

    code, alignment = ("H", 2) if nvertices <= _MAX_16BIT_VERTICES else ("I", 4)

    indices: list[int] = []
    watermark = 0
    for tri in tris:
        for node in tri:
            index = order[node]
            indices.append(watermark - index)
            if index == watermark:
                watermark += 1

    out.align(alignment)
    out.uint32(len(tris))
    if tris:
        out.array(code, indices)

    for edge in (west, south, east, north):
        out.uint32(len(edge))
        out.array(code, edge)

    if normals is not None:
        normal_list = list(normals)
        out.write(bytes([_EXTENSION_NORMALS]))
        out.uint32(len(normal_list) * 2)
        out.write(bytes(b for n in normal_list for b in oct_encode(n)))

    log.debug(
        "wrote quantized mesh: %d vertices, %d triangles, %d-bit indices",
        nvertices,
        len(tris),
        alignment * 8,
    )
    return header


def _bbox_from_header(header: QuantizedMeshHeader) -> BBox3D:
    cx, cy, _ = header.bounding_sphere_center
    r = header.bounding_sphere_radius
    return BBox3D(
        (cx - r, cy - r, header.minimum_height),
        (cx + r, cy + r, header.maximum_height),
    )


def _decode_vertices(
    bbox: BBox3D, us: Sequence[int], vs: Sequence[int], hs: Sequence[int]
) -> list[Vertex]:
    vertices: list[Vertex] = []
    u = v = h = 0
    for du, dv, dh in zip(us, vs, hs):
        u += zig_zag_decode(du)
        v += zig_zag_decode(dv)
        h += zig_zag_decode(dh)
        vertices.append(
            (
                dequantize_coordinate(u, bbox.min[0], bbox.max[0]),
                dequantize_coordinate(v, bbox.min[1], bbox.max[1]),
                dequantize_coordinate(h, bbox.min[2], bbox.max[2]),
            )
        )
    return vertices


def _decode_faces(indices: Sequence[int]) -> list[Face]:
    faces: list[Face] = []
    highest = 0
    codes = iter(indices)
    for triple in zip(codes, codes, codes):
        face = []
        for code in triple:
            face.append(highest - code)
            if code == 0:
                highest += 1
        faces.append((face[0], face[1], face[2]))
    return faces


def read_quantized_mesh(
    stream: BinaryIO,
) -> tuple[QuantizedMeshHeader, list[Vertex], list[Face]]:
    """Read a quantized-mesh tile.

    Returns the header, the vertices dequantized against the box implied by
    the header's bounding sphere and heights, and the triangle faces as
    vertex indices. Edge indices and extensions are not read.
    """
    reader = _Reader(stream)
    header = _unpack_header(reader.read(_HEADER.size, "QuantizedMeshHeader"))

    vertex_count = reader.uint32("VertexData::vertexCount")
    us = reader.array("H", vertex_count, "VertexData::u")
    vs = reader.array("H", vertex_count, "VertexData::v")
    hs = reader.array("H", vertex_count, "VertexData::height")

    code, alignment = ("H", 2) if vertex_count <= _MAX_16BIT_VERTICES else ("I", 4)
    remainder = reader.pos % alignment
    if remainder:
        reader.read(alignment - remainder, "padding")

    triangle_count = reader.uint32("IndexData::triangleCount")
    indices = reader.array(code, triangle_count * 3, "IndexData::indices")

    bbox = _bbox_from_header(header)
    vertices = _decode_vertices(bbox, us, vs, hs)
    faces = _decode_faces(indices)
    log.debug("%d vertices, %d faces after decoding", len(vertices), len(faces))
    return header, vertices, faces