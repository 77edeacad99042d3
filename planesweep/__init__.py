"""Plane-sweep depth estimation with a graph-cut max-flow solver."""

__version__ = "0.1.0"
__all__ = ["cameras", "depth", "maxflow"]