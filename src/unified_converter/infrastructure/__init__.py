"""Infrastructure adapters for application ports."""
