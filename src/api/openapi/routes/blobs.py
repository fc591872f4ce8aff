"""Blob upload, download, delete and listing endpoints."""

import mimetypes
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, File, Path, Query, UploadFile
from fastapi.responses import PlainTextResponse, StreamingResponse

from src.api.dependencies import BlobServiceDep
from src.application.dtos.blobs import ListingEntry, UploadResponse

router = APIRouter()

DEFAULT_CONTENT_TYPE = "application/octet-stream"

FilenameQuery = Annotated[
    str,
    Query(min_length=1, description="Blob key as returned by /upload"),
]


def guess_content_type(filename: str) -> str:
    """Content type for a filename, inferred from its extension."""
    mime, _encoding = mimetypes.guess_type(filename)
    return mime or DEFAULT_CONTENT_TYPE


def attachment_header(filename: str) -> str:
    """Build a Content-Disposition value marking the body as an attachment."""
    if filename.isascii():
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f"attachment; filename*=UTF-8''{quote(filename)}"


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a file",
    description=(
        "Store the multipart field `myfile` under a new unique key and "
        "return a temporary read URL."
    ),
)
async def upload(
    service: BlobServiceDep,
    myfile: Annotated[UploadFile, File(description="File to upload")],
) -> UploadResponse:
    """Upload one file to the default container."""
    data = await myfile.read()
    return await service.upload_file(data, myfile.filename)


@router.get(
    "/read-file",
    response_class=StreamingResponse,
    summary="Read a file",
    description="Stream the raw bytes of a stored file.",
)
async def read_file(
    service: BlobServiceDep,
    filename: FilenameQuery,
) -> StreamingResponse:
    """Stream a blob without download headers."""
    stream = await service.get_file(filename)
    return StreamingResponse(stream, media_type=DEFAULT_CONTENT_TYPE)


@router.get(
    "/download-file",
    response_class=StreamingResponse,
    summary="Download a file",
    description="Stream a stored file as an attachment with its content type.",
)
async def download_file(
    service: BlobServiceDep,
    filename: FilenameQuery,
) -> StreamingResponse:
    """Stream a blob with Content-Type and Content-Disposition set."""
    stream = await service.get_file(filename)
    return StreamingResponse(
        stream,
        media_type=guess_content_type(filename),
        headers={"Content-Disposition": attachment_header(filename)},
    )


@router.delete(
    "/delete/{filename}",
    response_class=PlainTextResponse,
    summary="Delete a file",
    description="Delete a stored file. Deleting a missing file is an error.",
)
async def delete(
    service: BlobServiceDep,
    filename: Annotated[str, Path(description="Blob key to delete")],
) -> str:
    """Delete a blob and return a confirmation message."""
    return await service.delete_file(filename)


@router.get(
    "/listAll",
    response_model=list[ListingEntry],
    summary="List files",
    description="List every stored file with a fresh temporary read URL.",
)
async def list_files(service: BlobServiceDep) -> list[ListingEntry]:
    """List all blobs in the default container."""
    return await service.list_files()
