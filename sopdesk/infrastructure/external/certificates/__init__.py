"""Certificate rendering adapter."""

from sopdesk.infrastructure.external.certificates.http_renderer import HttpCertificateRenderer

__all__ = ["HttpCertificateRenderer"]
