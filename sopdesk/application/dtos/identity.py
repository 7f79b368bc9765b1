"""DTOs for verified identities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class VerifiedIdentity:
    """Result of bearer-token verification: stable subject id and email."""

    subject_id: str
    email: str
