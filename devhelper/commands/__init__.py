"""Commands module for dev-helper CLI."""
