"""Application use cases on top of the JSON storage."""
