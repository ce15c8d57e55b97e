from .profiling import timed  # noqa: F401

__all__ = ["timed"]
