"""
CLI commands for the roster cost engine.
"""
from .commands import cli

__all__ = ['cli']
