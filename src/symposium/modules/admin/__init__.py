"""Admin module - Review and oversight for directors and managers."""
