"""Datasets bundled for `:play`."""
