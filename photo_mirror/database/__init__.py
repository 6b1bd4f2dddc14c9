"""Local media store."""
