"""Translated renderings of newsletter posts with an in-page language toggle."""

__version__ = "1.0.0"
