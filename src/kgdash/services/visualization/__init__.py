"""
Frame rendering for kg-dashboard layouts.
"""

from .renderer import FrameRenderer, short_label

__all__ = [
    "FrameRenderer",
    "short_label",
]
