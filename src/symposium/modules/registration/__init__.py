"""Registration module - Sign-up for advisors, students and judges."""
