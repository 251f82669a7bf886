"""Client-side synchronization and caching layer for the users/roles admin API."""

__version__ = "0.1.0"
