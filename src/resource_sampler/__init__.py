"""In-process host resource sampler with terminal chart reports."""

__version__ = "0.1.0"
