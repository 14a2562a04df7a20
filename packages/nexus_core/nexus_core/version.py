"""Version information for nexus_core."""

__version__ = "0.1.0"
