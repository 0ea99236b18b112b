"""
packwerk-parity

Compares the packwerk and experimental parser caches written by the packs
binary and reports the first file whose unresolved references differ.
"""

__version__ = "1.0"
