"""mrel - release orchestrator for multi-package source trees."""

__version__ = "0.1.0"
