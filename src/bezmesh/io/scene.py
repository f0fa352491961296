"""Reader for line-based scene files mixing OFF triangles and Bézier patches.

A scene file is a sequence of sections, each opened by a header line:

``OFF``
    A count line ``nv nf [ne]``, ``nv`` vertex lines ``x y z [r g b]`` and
    then face lines ``k i0 i1 ...``.  Only triangular faces (``k == 3``) are
    kept.
``CBEZ333``
    Bicubic patches, 20 lines each: 16 control points in row-major order
    followed by the 4 corner colors.
``CBEZ443``
    Degree (4, 4) patches, 29 lines each: 25 control points and 4 colors.

Blank lines and lines starting with ``#`` are ignored.  Malformed patches
and faces are logged and skipped unless ``strict`` is requested, in which
case the :class:`~bezmesh.errors.PatchFormatError` propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from bezmesh.errors import PatchFormatError
from bezmesh.geometry_utils import Color, ZERO3, triangle_normal
from bezmesh.patch import BezierRectangle
from bezmesh.triangle import Triangle

logger = logging.getLogger(__name__)

OFF = "OFF"

# header -> patch degree (n, m)
PATCH_SECTIONS: Dict[str, Tuple[int, int]] = {
    "CBEZ333": (3, 3),
    "CBEZ443": (4, 4),
}

WHITE: Color = (1.0, 1.0, 1.0)

Line = Tuple[int, str]


@dataclass
class Scene:
    """Everything read from one scene file."""

    triangles: List[Triangle] = field(default_factory=list)
    patches: List[BezierRectangle] = field(default_factory=list)

    def patch_groups(self) -> Dict[Tuple[int, int], List[BezierRectangle]]:
        """Group patches by degree, in order of first appearance."""

        groups: Dict[Tuple[int, int], List[BezierRectangle]] = {}
        for patch in self.patches:
            groups.setdefault(patch.degree, []).append(patch)
        return groups


def patch_line_count(n: int, m: int) -> int:
    """Number of value lines describing one degree ``(n, m)`` patch."""

    return (n + 1) * (m + 1) + 4


def parse_color(text: str) -> Color:
    """Parse ``"rrggbb"`` or ``"#rrggbb"`` into an RGB tuple in ``[0, 1]``."""

    s = text.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6:
        raise ValueError(f"expected a six digit hex color, got {text!r}")
    try:
        r, g, b = (int(s[k:k + 2], 16) for k in (0, 2, 4))
    except ValueError:
        raise ValueError(f"invalid hex color {text!r}") from None
    return r / 255.0, g / 255.0, b / 255.0


def parse_vector(text: str, *, line: Optional[int] = None) -> Tuple[float, float, float]:
    """Parse the first three whitespace separated numbers of ``text``."""

    fields = text.split()
    if len(fields) < 3:
        raise PatchFormatError(
            f"missing vector element: {len(fields)} of 3 coordinates given",
            expected=3, actual=len(fields), line=line,
        )
    try:
        return float(fields[0]), float(fields[1]), float(fields[2])
    except ValueError as exc:
        raise PatchFormatError(f"invalid coordinate in {text.strip()!r}", line=line) from exc


def parse_rect_patch(lines: Union[str, Sequence[str]], n: int, m: int, *,
                     first_line: int = 1) -> BezierRectangle:
    """Build a degree ``(n, m)`` patch from its textual description.

    ``lines`` holds ``(n+1)*(m+1)`` control point lines followed by 4 color
    lines, each with three numbers.  Blank lines are ignored.
    """

    if isinstance(lines, str):
        lines = lines.splitlines()
    numbered = [(first_line + k, ln) for k, ln in enumerate(lines) if ln.strip()]
    return _patch_from_lines(numbered, n, m, first_line=first_line)


def _patch_from_lines(numbered: Sequence[Line], n: int, m: int, *, first_line: int) -> BezierRectangle:
    values = [parse_vector(text, line=lineno) for lineno, text in numbered]
    expected = patch_line_count(n, m)
    if len(values) != expected:
        raise PatchFormatError(
            f"{len(values)} values given, {expected} expected",
            expected=expected, actual=len(values), line=first_line,
        )
    npts = expected - 4
    return BezierRectangle(n, m, values[:npts], values[npts:])


def read_scene(path_or_file, *, strict: bool = False, default_color: Color = WHITE) -> Scene:
    """Read a scene from a path or an open text or binary stream.

    Bytes must be UTF-8; undecodable input raises :class:`PatchFormatError`
    pointing at the offending line.
    """

    if hasattr(path_or_file, "read"):
        data = path_or_file.read()
    else:
        with open(path_or_file, "rb") as f:
            data = f.read()
    if isinstance(data, bytes):
        data = _decode(data)
    return parse_scene(data, strict=strict, default_color=default_color)


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        line = data.count(b"\n", 0, exc.start) + 1
        raise PatchFormatError(f"invalid UTF-8 at byte {exc.start}", line=line) from exc


def parse_scene(text: str, *, strict: bool = False, default_color: Color = WHITE) -> Scene:
    scene = Scene()
    for kind, lines in _split_sections(text):
        if kind == OFF:
            try:
                scene.triangles.extend(_parse_off(lines, strict=strict, default_color=default_color))
            except PatchFormatError as exc:
                _skip_or_raise(exc, "OFF section", strict)
        else:
            n, m = PATCH_SECTIONS[kind]
            scene.patches.extend(_parse_patches(lines, n, m, strict=strict))
    logger.info("read %d triangle(s) and %d patch(es)", len(scene.triangles), len(scene.patches))
    return scene


def _split_sections(text: str) -> List[Tuple[str, List[Line]]]:
    sections: List[Tuple[str, List[Line]]] = []
    stray = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        s = raw.strip()
        if not s or s.startswith("#"):
            continue
        if s == OFF or s in PATCH_SECTIONS:
            sections.append((s, []))
        elif sections:
            sections[-1][1].append((lineno, s))
        else:
            stray += 1
    if stray:
        logger.warning("ignored %d line(s) before the first section header", stray)
    return sections


def _skip_or_raise(exc: PatchFormatError, what: str, strict: bool) -> None:
    if strict:
        raise exc
    where = f" at line {exc.line}" if exc.line is not None else ""
    logger.warning("skipping %s%s: %s", what, where, exc)


def _parse_patches(lines: List[Line], n: int, m: int, *, strict: bool) -> List[BezierRectangle]:
    size = patch_line_count(n, m)
    patches: List[BezierRectangle] = []
    for start in range(0, len(lines), size):
        chunk = lines[start:start + size]
        first = chunk[0][0]
        try:
            patches.append(_patch_from_lines(chunk, n, m, first_line=first))
        except PatchFormatError as exc:
            _skip_or_raise(exc, f"degree ({n}, {m}) patch", strict)
    return patches


def _parse_off(lines: List[Line], *, strict: bool, default_color: Color) -> List[Triangle]:
    if not lines:
        return []
    count_line, count_text = lines[0]
    try:
        nv = int(count_text.split()[0])
    except ValueError as exc:
        raise PatchFormatError(f"invalid OFF vertex count {count_text!r}", line=count_line) from exc
    if nv < 0:
        raise PatchFormatError(f"negative OFF vertex count {nv}", line=count_line)
    if len(lines) - 1 < nv:
        raise PatchFormatError(
            f"{len(lines) - 1} vertices given, {nv} expected",
            expected=nv, actual=len(lines) - 1, line=count_line,
        )

    positions = []
    colors = []
    for lineno, text in lines[1:1 + nv]:
        positions.append(parse_vector(text, line=lineno))
        fields = text.split()
        if len(fields) >= 6:
            colors.append(parse_vector(" ".join(fields[3:6]), line=lineno))
        else:
            colors.append(default_color)

    triangles: List[Triangle] = []
    for lineno, text in lines[1 + nv:]:
        try:
            tri = _off_face(text, lineno, positions, colors)
        except PatchFormatError as exc:
            _skip_or_raise(exc, "OFF face", strict)
            continue
        if tri is not None:
            triangles.append(tri)
    return triangles


def _off_face(text: str, lineno: int, positions, colors) -> Optional[Triangle]:
    fields = text.split()
    try:
        k = int(fields[0])
        idx = [int(f) for f in fields[1:1 + k]]
    except ValueError as exc:
        raise PatchFormatError(f"invalid OFF face {text!r}", line=lineno) from exc
    if k != 3:
        logger.debug("ignoring %d-sided OFF face at line %d", k, lineno)
        return None
    if len(idx) != 3:
        raise PatchFormatError(f"{len(idx)} vertex indices given, 3 expected",
                               expected=3, actual=len(idx), line=lineno)
    if any(i < 0 or i >= len(positions) for i in idx):
        raise PatchFormatError(f"OFF face references a missing vertex: {text!r}", line=lineno)

    pts = [positions[i] for i in idx]
    normal = triangle_normal(*pts)
    if normal is None:
        normal = tuple(ZERO3)
    return Triangle.create(pts, [colors[i] for i in idx], [normal, normal, normal])


__all__ = [
    "OFF",
    "PATCH_SECTIONS",
    "Scene",
    "patch_line_count",
    "parse_color",
    "parse_vector",
    "parse_rect_patch",
    "parse_scene",
    "read_scene",
]
