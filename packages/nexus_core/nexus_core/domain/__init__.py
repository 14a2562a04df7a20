"""Domain layer: event vocabulary, plugin descriptors and exceptions."""
