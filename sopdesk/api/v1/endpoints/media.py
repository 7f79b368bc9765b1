"""Media upload signing API (admin)."""

from fastapi import APIRouter, Request

from sopdesk.api.v1.dependencies import AdminDep, CapabilitiesDep
from sopdesk.core.limiter import limit_writes
from sopdesk.domain.exceptions import ServiceUnavailableException
from sopdesk.schemas.media import UploadSignatureRequest, UploadSignatureResponse

router = APIRouter()


@router.post("/upload-signature", response_model=UploadSignatureResponse)
@limit_writes
async def create_upload_signature(
    request: Request,
    caller: AdminDep,
    caps: CapabilitiesDep,
    body: UploadSignatureRequest | None = None,
):
    """Return signed parameters for a direct upload into the tenant's media folder."""
    if caps.media is None:
        raise ServiceUnavailableException("media")
    public_id = body.public_id if body else None
    return UploadSignatureResponse(**await caps.media.sign_upload(caller.owner_id, public_id))
