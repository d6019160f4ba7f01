"""Advisors module - Science Research Advisor profiles and their students."""
