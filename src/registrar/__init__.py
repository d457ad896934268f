"""Course enrollment and student pagination over an embedded SQLite store."""

__version__ = "0.1.0"
