"""Invitations module - Token-gated signatures by people without an account."""
