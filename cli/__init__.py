"""CLI package for Bibby Stacks"""
from .main import cli

__all__ = ['cli']
