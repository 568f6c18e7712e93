"""Syntax trees, evaluators and a command registry for recovery update scripts."""

__version__ = "0.1.0"