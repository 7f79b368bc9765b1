"""Managed identity (Firebase Auth admin) adapter."""

from sopdesk.infrastructure.external.identity.identity_toolkit import IdentityToolkitClient

__all__ = ["IdentityToolkitClient"]
