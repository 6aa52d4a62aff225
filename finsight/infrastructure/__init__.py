"""Infrastructure layer - adapters for models, storage and caching."""
