"""Adapters for external collaborators (payments, media, certificates, managed identity)."""
