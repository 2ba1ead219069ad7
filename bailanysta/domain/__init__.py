"""Domain entities and pure helpers (hashtags, search) with no I/O."""
