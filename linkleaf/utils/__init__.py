"""Utility helpers for linkleaf."""
