"""snowbird - pick the best day to escape Minneapolis for Las Vegas."""

__version__ = "0.3.0"
