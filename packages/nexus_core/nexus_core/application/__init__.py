"""Application layer: event bus and plugin registry."""
