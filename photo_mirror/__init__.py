"""Mirror a cloud photo library into a local SQLite store."""

__version__ = "0.1.0"
