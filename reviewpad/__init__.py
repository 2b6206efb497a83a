"""Pull request automation model: review files, linting, workflow evaluation and event collection."""

__version__ = "0.1.0"