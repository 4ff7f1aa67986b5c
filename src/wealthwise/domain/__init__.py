"""Domain-level abstractions shared by services and infrastructure."""
