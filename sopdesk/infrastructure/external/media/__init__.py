"""Media upload signing."""

from sopdesk.infrastructure.external.media.signer import MediaUploadSigner

__all__ = ["MediaUploadSigner"]
