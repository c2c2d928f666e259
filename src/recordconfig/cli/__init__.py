"""Command line interface for recordconfig."""
