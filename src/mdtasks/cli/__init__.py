"""Command line interface handlers."""
