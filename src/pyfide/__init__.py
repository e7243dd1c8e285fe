"""Query, ranking and statistics engine for a catalog of chess-player records."""

__version__ = "0.1.0"
