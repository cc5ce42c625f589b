"""Fruit Match level difficulty and solvable sink generation engine."""

__version__ = "1.0.0"
