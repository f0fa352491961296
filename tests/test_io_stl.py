import io
import struct

from bezmesh.io.stl import write_stl
from bezmesh.patch import BezierRectangle
from bezmesh.triangle import Triangle

COLORS = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0), (1.0, 1.0, 1.0)]


def _make_triangles():
    pts = [(float(i), float(j), 0.0) for j in range(2) for i in range(2)]
    return BezierRectangle(1, 1, pts, COLORS).to_triangles()


def _degenerate():
    p = (1.0, 1.0, 1.0)
    return Triangle.create([p, p, p], COLORS[:3], [(0.0, 0.0, 0.0)] * 3)


def test_write_stl_binary(tmp_path):
    path = tmp_path / 'quad.stl'
    count = write_stl(_make_triangles(), path, binary=True, name='test')
    assert count == 2

    data = path.read_bytes()
    assert len(data) == 80 + 4 + 2 * 50  # header + count + two triangles
    assert data[0:4] == b'test'
    assert struct.unpack('<I', data[80:84])[0] == 2
    normal = struct.unpack('<3f', data[84:96])
    assert normal == (0.0, 0.0, 1.0)


def test_write_stl_binary_stream():
    buf = io.BytesIO()
    write_stl(_make_triangles(), buf)
    assert len(buf.getvalue()) == 184
    assert not buf.closed


def test_write_stl_ascii():
    buf = io.StringIO()
    write_stl(_make_triangles(), buf, binary=False, name='ascii_test')

    text = buf.getvalue()
    assert 'solid ascii_test' in text
    assert text.count('facet normal') == 2
    assert text.count('vertex') == 6
    assert text.strip().endswith('endsolid ascii_test')


def test_degenerate_triangles_skipped(tmp_path):
    path = tmp_path / 'skip.stl'
    count = write_stl(_make_triangles() + [_degenerate()], path)
    assert count == 2
    assert struct.unpack('<I', path.read_bytes()[80:84])[0] == 2


def test_empty_stl(tmp_path):
    path = tmp_path / 'empty.stl'
    assert write_stl([], path) == 0
    assert len(path.read_bytes()) == 84


def test_tiny_triangles_are_kept(tmp_path):
    s = 1e-4
    tri = Triangle.create([(0.0, 0.0, 0.0), (s, 0.0, 0.0), (0.0, s, 0.0)], COLORS[:3], [(0.0, 0.0, 1.0)] * 3)
    assert write_stl([tri], tmp_path / 'tiny.stl') == 1


def test_ascii_non_ascii_name(tmp_path):
    path = tmp_path / 'named.stl'
    assert write_stl(_make_triangles(), path, binary=False, name='scène') == 2
    text = path.read_text(encoding='ascii')
    assert text.startswith('solid sc?ne')
    assert text.strip().endswith('endsolid sc?ne')
