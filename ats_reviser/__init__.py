"""AI resume revision against a target job description."""

__version__ = "0.1.0"
