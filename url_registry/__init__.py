"""Local URL shortener built around a persisted link registry."""

__version__ = "1.0.0"
