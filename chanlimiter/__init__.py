"""Thread-safe rate limiter that delivers the most recent item at a fixed pace."""

__version__ = "0.1.0"
__all__ = ["limiter"]