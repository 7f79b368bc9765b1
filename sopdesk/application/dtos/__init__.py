"""Application DTOs (frozen dataclasses returned by repositories and use cases)."""
