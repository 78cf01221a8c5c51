"""Command-line interface for the SqlPad console."""
