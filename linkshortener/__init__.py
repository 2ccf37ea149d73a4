"""Short-link service with expiring, visit-limited links."""

__version__ = '0.1.0'
