"""covmerge - merge per-process line coverage fragments into one report."""

__version__ = "0.1.0"
