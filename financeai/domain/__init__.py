"""Domain records and pure helpers (slugs, search matching, request validation)."""
