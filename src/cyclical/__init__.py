"""Cyclical - month calendar with per-day markers."""
