"""Write one-sentence summaries into markdown article front matter."""

__version__ = "0.1.0"
