"""Core components for the SqlPad console: vault, driver, executor and session."""
