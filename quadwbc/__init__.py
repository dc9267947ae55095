"""Whole-body control building blocks for legged robots: linear tasks, contact constraints and swing scheduling."""

__version__ = "0.1.0"