"""Sample LP / MIP / QP problems built and solved with OR-Tools."""

__version__ = "0.1.0"
