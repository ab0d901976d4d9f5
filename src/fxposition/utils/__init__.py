"""Utility helpers for fxposition."""
