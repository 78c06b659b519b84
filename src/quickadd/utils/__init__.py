"""Utility helpers for quickadd."""
