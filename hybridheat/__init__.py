"""Two-dimensional heat equation solver with strip decomposition, and small parallel-computing demos."""

__version__ = "0.1.0"

__all__ = ["affinity", "core", "field", "fileview", "hello", "io", "solver"]