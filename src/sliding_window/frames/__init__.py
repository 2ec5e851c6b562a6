"""
Frame arithmetic: logical frames, material buckets and frame ranges.
"""

from .builder import FrameBuilder
from .frame import Frame

__all__ = ["Frame", "FrameBuilder"]
