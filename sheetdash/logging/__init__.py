"""Logging setup for the sheetdash CLI (labeled stdout lines)."""
