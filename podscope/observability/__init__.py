"""Logging and metrics for podscope."""
