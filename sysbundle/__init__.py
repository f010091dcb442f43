"""sysbundle - standalone bundles of dist systems and their dependencies."""

__version__ = "0.3.0"
