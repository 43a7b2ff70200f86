"""TextCut: transcript-driven clip editing."""

__version__ = "0.1.0"
