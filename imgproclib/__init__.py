"""Processing tasks for 2D detector frames: transforms and measurements."""

__version__ = "0.1.0"