"""Blood test report backend: synthesized panels, health scores and an assistant chat."""

__version__ = "0.1.0"
