"""Bank customer records: local Postgres repository, remote user API and an LFU cache."""

__version__ = "1.0.0"
