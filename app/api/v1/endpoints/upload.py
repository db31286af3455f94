"""File upload endpoint."""

from fastapi import APIRouter, File, Form, UploadFile, status

from app.dependencies import UploadServiceDep
from app.schemas.common import ErrorResponse, UploadResponse

router = APIRouter(tags=["Upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Upload an image",
)
async def upload_file(
    upload_service: UploadServiceDep,
    file: UploadFile | None = File(None),
    path: str | None = Form(None),
) -> UploadResponse:
    """
    Upload a single image to the storage bucket and make it public.

    Args:
        upload_service: Upload service
        file: Image file (multipart field ``file``)
        path: Optional key prefix, ``uploads`` by default

    Returns:
        Public URL and storage key of the uploaded file

    Raises:
        UploadException: If no file is given or it is not an image
    """
    data = await file.read() if file is not None else None
    result = await upload_service.upload_image(
        data,
        original_name=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        path=path,
    )
    return UploadResponse(success=True, url=result.url, file_name=result.file_name)
