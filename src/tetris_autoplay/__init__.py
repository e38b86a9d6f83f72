"""Headless Tetris with an exhaustive single-piece autoplay search."""

__version__ = "0.1.0"
