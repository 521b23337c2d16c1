"""
Skillpack - skill library toolkit

Author, validate, index, route and load Markdown skill documents packaged
as agent plugins and marketplaces.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("skillpack")
except PackageNotFoundError:
    __version__ = "0.4.0"

__all__ = [
    "__version__",
]
