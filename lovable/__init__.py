"""Prompt intent resolution and Flutter code generation for lovable projects."""

__version__ = "0.1.0"
