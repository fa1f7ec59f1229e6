"""zonectl — affected-package analysis for merge-queue zones."""

__version__ = "0.1.0"
