"""Students module - Student registrations, materials and forms."""
