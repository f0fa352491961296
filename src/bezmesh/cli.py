"""Command-line front end: read a scene, tessellate it, report and export."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from bezmesh.config import TessellationConfig, load_config
from bezmesh.errors import ConfigError, PatchFormatError
from bezmesh.io.scene import parse_color, read_scene
from bezmesh.io.stl import write_stl
from bezmesh.logging_config import setup_logging
from bezmesh.mesh import tessellate_scene, triangles_to_mesh
from bezmesh.triangle import concat_triangles

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bezmesh",
        description="Tessellate Bézier patches and OFF triangles into a flat-shaded mesh.",
    )
    parser.add_argument("file", type=Path, help="Scene file with OFF / CBEZ333 / CBEZ443 sections.")
    parser.add_argument("--budget", type=int, help="Refine each patch group until it has at least this many patches.")
    parser.add_argument("--split", type=float, help="Split parameter used for cross subdivision (default 0.5).")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="Abort on malformed patches instead of skipping them.")
    parser.add_argument("--color", type=parse_color, help="Default color for OFF vertices, e.g. '#c8d0e6'.")
    parser.add_argument("--config", type=Path, help="YAML settings file.")
    parser.add_argument("--stl", type=Path, help="Write all triangles to this STL file.")
    parser.add_argument("--ascii", action="store_true", help="Write ASCII instead of binary STL.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log output (-v info, -vv debug).")
    parser.add_argument("--log-file", help="Also write log output to this file.")
    return parser


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(_log_level(args.verbose), args.log_file)

    try:
        cfg: TessellationConfig = load_config(args.config).replace(
            budget=args.budget,
            split=args.split,
            strict=args.strict,
            default_color=args.color,
        )
    except (ConfigError, OSError) as exc:
        logger.error("configuration error: %s", exc)
        return 1

    try:
        scene = read_scene(args.file, strict=cfg.strict, default_color=cfg.default_color)
    except FileNotFoundError:
        logger.error("file not found: %s", args.file)
        return 1
    except PatchFormatError as exc:
        logger.error("malformed input in %s: %s", args.file, exc)
        return 1
    except OSError as exc:
        logger.error("cannot read %s: %s", args.file, exc)
        return 1

    groups = tessellate_scene(scene, budget=cfg.budget, t=cfg.split)
    meshes = [triangles_to_mesh(group) for group in groups]
    labels = ["triangles"] + [f"patches {n}x{m}" for n, m in scene.patch_groups()]
    for label, mesh in zip(labels, meshes):
        print(f"{label}: {mesh.triangle_count} triangles")
    print(f"total: {sum(m.triangle_count for m in meshes)} triangles")

    if args.stl is not None:
        triangles = concat_triangles(groups)
        try:
            written = write_stl(triangles, args.stl, binary=not args.ascii, name=args.file.stem)
        except OSError as exc:
            logger.error("cannot write %s: %s", args.stl, exc)
            return 1
        logger.info("wrote %d facets to %s", written, args.stl)

    return 0


if __name__ == "__main__":
    sys.exit(main())
