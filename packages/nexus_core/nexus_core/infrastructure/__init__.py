"""Infrastructure layer: logging and monitoring."""
