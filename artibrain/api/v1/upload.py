"""
File upload endpoint.
"""

from fastapi import APIRouter, File, Request, UploadFile, status

from artibrain.api.deps import CurrentPrincipal, DbSession, get_client_ip, unwrap
from artibrain.schemas.common import UploadResponse
from artibrain.services.uploads import UploadService

router = APIRouter()


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Request,
    principal: CurrentPrincipal,
    db: DbSession,
    file: UploadFile = File(...),
):
    """Store a file and return the URL it is served from."""
    service = UploadService(db)
    data = await service.read_upload(file)
    url = unwrap(await service.store(principal, file.filename, data, ip_address=get_client_ip(request)))
    return UploadResponse(url=url)
