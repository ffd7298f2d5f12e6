"""
NGP Nim - 双人联机 Nim

A two-player Nim game played over the NGP line protocol, with a threaded
server and a Pygame client.
"""

__version__ = "0.1.0"
__author__ = "NGP Nim Team"
__license__ = "MIT"

__all__ = ["__version__"]
