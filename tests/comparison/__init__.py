"""
Comparison test helpers

Builds projects with packwerk and experimental cache artifacts for the
parity checker tests.
"""

__all__ = ["ArtifactFactory", "record"]
