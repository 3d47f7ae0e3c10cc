"""stackq: search Stack Exchange sites from the terminal."""

__version__ = "0.1.0"
