"""Submissions module - Research artifact uploads."""
