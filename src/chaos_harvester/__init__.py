"""Reconcile harvested external objects with the CHAOS content service."""

__version__ = "0.3.0"
