import logging
import struct

import pytest

from bezmesh import __version__
from bezmesh.cli import build_parser, main


def _patch_lines(z=0.0):
    lines = [f"{i} {j} {z}" for j in range(4) for i in range(4)]
    return lines + ["1 0 0", "0 1 0", "0 0 1", "1 1 1"]


SCENE = "\n".join(
    ["OFF", "3 1 0", "0 0 0", "1 0 0", "0 1 0", "3 0 1 2", "CBEZ333"] + _patch_lines()
) + "\n"


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("bezmesh")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def scene_file(tmp_path, monkeypatch):
    monkeypatch.delenv("BEZMESH_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    path = tmp_path / "demo.txt"
    path.write_text(SCENE, encoding="utf-8")
    return path


def test_version_is_string():
    assert isinstance(__version__, str)


def test_parser_defaults():
    args = build_parser().parse_args(["scene.txt"])
    assert args.budget is None
    assert args.strict is None
    assert args.verbose == 0


def test_summary(scene_file, capsys):
    assert main([str(scene_file), "--budget", "4"]) == 0
    out = capsys.readouterr().out
    assert "triangles: 1 triangles" in out
    assert "patches 3x3: 8 triangles" in out
    assert "total: 9 triangles" in out


def test_stl_export(scene_file, tmp_path, capsys):
    stl = tmp_path / "demo.stl"
    assert main([str(scene_file), "--budget", "4", "--stl", str(stl)]) == 0
    data = stl.read_bytes()
    assert data[:4] == b"demo"
    assert struct.unpack("<I", data[80:84])[0] == 9


def test_ascii_export(scene_file, tmp_path):
    stl = tmp_path / "demo.stl"
    assert main([str(scene_file), "--budget", "1", "--stl", str(stl), "--ascii"]) == 0
    text = stl.read_text(encoding="ascii")
    assert text.startswith("solid demo")
    assert text.count("facet normal") == 3


def test_config_file(scene_file, tmp_path, capsys):
    conf = tmp_path / "conf.yaml"
    conf.write_text("budget: 16\n", encoding="utf-8")
    assert main([str(scene_file), "--config", str(conf)]) == 0
    assert "patches 3x3: 32 triangles" in capsys.readouterr().out
    # command line wins over the file
    assert main([str(scene_file), "--config", str(conf), "--budget", "1"]) == 0
    assert "patches 3x3: 2 triangles" in capsys.readouterr().out


def test_missing_scene(tmp_path):
    assert main([str(tmp_path / "nope.txt")]) == 1


def test_bad_config(scene_file, tmp_path):
    conf = tmp_path / "conf.yaml"
    conf.write_text("budget: zero\n", encoding="utf-8")
    assert main([str(scene_file), "--config", str(conf)]) == 1
    assert main([str(scene_file), "--config", str(tmp_path / "none.yaml")]) == 1


def test_strict_mode(tmp_path, scene_file, capsys):
    bad = tmp_path / "bad.txt"
    bad.write_text(SCENE.replace("3 3 0.0", "3 3"), encoding="utf-8")
    assert main([str(bad), "--budget", "1"]) == 0
    assert "patches" not in capsys.readouterr().out
    assert main([str(bad), "--strict"]) == 1


def test_invalid_utf8_scene(tmp_path, scene_file):
    bad = tmp_path / "bad.txt"
    bad.write_bytes(b"CBEZ333\n0 0 \xff\n")
    assert main([str(bad)]) == 1


def test_directory_as_scene(tmp_path, scene_file):
    assert main([str(tmp_path)]) == 1


def test_logs_stay_off_stdout(scene_file, capsys):
    assert main([str(scene_file), "--budget", "4", "-v"]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "triangles: 1 triangles",
        "patches 3x3: 8 triangles",
        "total: 9 triangles",
    ]
    assert "INFO" in captured.err


def test_ascii_export_non_ascii_name(tmp_path, scene_file):
    named = tmp_path / "scène.txt"
    named.write_text(SCENE, encoding="utf-8")
    stl = tmp_path / "out.stl"
    assert main([str(named), "--budget", "1", "--stl", str(stl), "--ascii"]) == 0
    assert stl.read_text(encoding="ascii").startswith("solid sc?ne")
