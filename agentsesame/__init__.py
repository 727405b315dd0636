"""Terminal-independent building blocks for a fuzzy finder over coding agent sessions."""

__version__ = "0.1.2"