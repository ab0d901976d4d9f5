"""Command line interface for fxposition."""
