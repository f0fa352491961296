"""STL export for flattened triangle lists.

STL carries one facet normal per triangle, so per-vertex colors and normals
are dropped; the facet normal is recomputed from the winding.
"""

from __future__ import annotations

import contextlib
import struct
from typing import IO, Iterable, Iterator, List

from bezmesh.mesh import TriTuple, mesh_view
from bezmesh.triangle import Triangle

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')


def write_stl(triangles: Iterable[Triangle], path_or_file, *, binary: bool = True,
              name: str = 'bezmesh') -> int:
    """Write ``triangles`` to STL and return the number of facets written.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    Degenerate triangles are left out.  Characters of ``name`` outside ASCII
    are written as ``?``.
    """

    facets = list(mesh_view(triangles))
    solid = name.encode('ascii', errors='replace').decode('ascii')

    if binary:
        with _output(path_or_file, 'wb') as stream:
            _write_binary(facets, stream, solid)
    else:
        with _output(path_or_file, 'w', encoding='ascii') as stream:
            _write_ascii(facets, stream, solid)
    return len(facets)


@contextlib.contextmanager
def _output(path_or_file, mode: str, **kwargs) -> Iterator[IO]:
    # streams handed in by the caller stay open
    if hasattr(path_or_file, 'write'):
        yield path_or_file
        return
    with open(path_or_file, mode, **kwargs) as stream:
        yield stream


def _write_binary(facets: List[TriTuple], stream: IO[bytes], solid: str) -> None:
    stream.write(solid[:_HEADER_SIZE].encode('ascii').ljust(_HEADER_SIZE, b' '))
    stream.write(struct.pack('<I', len(facets)))
    for normal, v0, v1, v2 in facets:
        stream.write(_STRUCT_TRIANGLE.pack(*normal, *v0, *v1, *v2, 0))


def _write_ascii(facets: List[TriTuple], stream: IO[str], solid: str) -> None:
    def vec(v) -> str:
        return f"{v[0]:.6e} {v[1]:.6e} {v[2]:.6e}"

    lines = [f"solid {solid}"]
    for normal, v0, v1, v2 in facets:
        lines.append(f"  facet normal {vec(normal)}")
        lines.append("    outer loop")
        lines.extend(f"      vertex {vec(v)}" for v in (v0, v1, v2))
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {solid}")
    stream.write("\n".join(lines) + "\n")


__all__ = ['write_stl']
