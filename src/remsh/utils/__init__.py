"""Utility helpers for remsh."""
