"""Plan import from tabular text."""
