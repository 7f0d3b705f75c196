"""
Media Upload Endpoints.

Profile pictures are uploaded as multipart form data. The spooled file is
streamed to the configured object store and its public URL is stored on the profile of
the user owning the given email.
"""

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from prs_online.core.errors import StorageError, UserNotFoundError
from prs_online.core.logging_config import get_logger
from prs_online.server.schemas import MediaUploadResponse
from prs_online.server.services.deps import MediaServiceDep

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/upload",
    response_model=MediaUploadResponse,
    summary="Upload Profile Picture",
    description="Store an uploaded image and attach its public URL to the user's profile.",
    response_description="The public URL of the stored image.",
    responses={
        404: {"description": "No user has the given email"},
        502: {"description": "The object store rejected the upload"},
    },
)
async def upload(media: MediaServiceDep, file: UploadFile = File(...), email: str = Form(...)):
    """
    Upload a profile picture.

    The picture replaces any picture already set on the user's profile; the
    profile is created when the user has none.
    """
    try:
        url = await media.upload_profile_picture(file.file, email, content_type=file.content_type)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except StorageError as e:
        logger.error(f"Upload for {email} failed: {e}")
        raise HTTPException(status_code=502, detail="Upload failed")
    return MediaUploadResponse(url=url)
