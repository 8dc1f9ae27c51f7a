"""dev-helper - read-only developer environment diagnostics."""

__version__ = "2.1.0"
