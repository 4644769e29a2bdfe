"""skillcopy - copy installed agent skills between projects."""

__version__ = "0.1.0"
