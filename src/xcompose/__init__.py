"""
xcompose - composition resolution and migration engine

Turns a composite resource request into composed resource templates through
one of two interchangeable composers, and migrates legacy patch-and-transform
compositions into function pipelines.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
