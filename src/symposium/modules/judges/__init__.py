"""Judges module - Volunteer judge profiles."""
