"""schematree — Borsh schema normalization and write-order attribution."""

__version__ = "0.1.0"
