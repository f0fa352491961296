"""I/O utilities for bezmesh."""

from .scene import Scene, parse_color, parse_rect_patch, read_scene
from .stl import write_stl

__all__ = ['Scene', 'parse_color', 'parse_rect_patch', 'read_scene', 'write_stl']
