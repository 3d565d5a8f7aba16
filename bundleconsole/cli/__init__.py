"""Command line interface of the console."""
