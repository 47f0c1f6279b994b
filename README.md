# tintiles

Pieces for producing triangulated terrain tiles in the quantized-mesh
format: the binary tile reader and writer, the scalar encodings it is built
on, zoom-level estimates for elevation rasters, and a CSV recorder for
meshing benchmark results. It has no dependencies beyond the standard
library.

## Modules

### `tintiles.quantized_mesh`

- `write_quantized_mesh(stream, triangles, bbox=None, normals=None, mesh_is_rescaled=False)`
  writes triangles (each three `(x, y, z)` vertices in web-mercator metres)
  to a binary stream as a quantized-mesh tile and returns the
  `QuantizedMeshHeader` it wrote. Vertices are quantized against `bbox`
  (a `BBox3D`, derived from the triangles when omitted), or taken as
  already scaled to `[0, 1]` when `mesh_is_rescaled` is true. Indices are
  16-bit for up to 65536 vertices and 32-bit above that; the west, south,
  east and north edge index lists are written too. When `normals` is given,
  one per vertex, they are appended as the oct-encoded normals extension.
- `read_quantized_mesh(stream)` returns `(header, vertices, faces)`.
  Vertices are dequantized against a box built from the header's bounding
  sphere and height range; faces are triples of vertex indices. Edge
  indices and extensions are not read. Truncated data raises `ValueError`.

### `tintiles.qm_codec`

- `zig_zag_encode(value)` / `zig_zag_decode(value)` – signed/unsigned
  16-bit zig-zag coding (out-of-range values raise `ValueError`).
- `quantize_coordinate(value, lo, hi)` / `dequantize_coordinate(value, lo, hi)`
  – map between `[lo, hi]` and `0..32767` (`QUANTIZED_COORDINATE_SIZE`);
  a degenerate range quantizes to 0.
- `mercator_to_ecef(x, y, z)` – web-mercator point with height to
  earth-centred coordinates on the WGS84 ellipsoid.
- `oct_encode(normal)` – two-byte octahedral encoding of a normal vector.

### `tintiles.overviews`

- `guess_max_zoom_level(resolution)` – zoom level whose pixel size best
  matches a resolution in metres.
- `guess_min_zoom_level(max_zoom_level, width, height)` – lowest zoom at
  which a raster of that size is still worth tiling, never below 0.
- `zoom_range(cell_size, width, height, min_zoom, max_zoom)` – clamps a
  requested range to those estimates and returns `(min_zoom, max_zoom)`;
  a negative `max_zoom` means "as deep as the data allows".

### `tintiles.benchmark_stats`

- `StatsRow` – dataclass of one benchmark run's measurements.
- `format_row(row)` – one CSV line ending in CRLF, in the order of
  `HEADER_LINE`.
- `StatsCSVWriter(path)` – `write_row(row)` appends a row, writing the
  header line first if the file is empty.
- `strip_home_dir(path, home_dir=None)` – replaces a leading home
  directory (by default `$HOME`) with `~`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
import io

from tintiles.quantized_mesh import BBox3D, read_quantized_mesh, write_quantized_mesh
from tintiles.overviews import zoom_range

triangles = [((0.0, 0.0, 0.0), (1.0, 0.0, 0.5), (0.0, 1.0, 1.0))]
bbox = BBox3D((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))

buffer = io.BytesIO()
write_quantized_mesh(buffer, triangles, bbox)
buffer.seek(0)
header, vertices, faces = read_quantized_mesh(buffer)

print(zoom_range(10.0, 4096, 4096, 0, -1))
```

## What it does not do

The package has no raster type or elevation file readers, no point-cloud
handling, no mesh generation from a height field, and no command-line
program. Triangles to be written must come from elsewhere, and the
benchmark helpers only format and record statistics; they do not run any
meshing.