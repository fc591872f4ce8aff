"""DTOs for blob operations."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UploadResponse(BaseModel):
    """Result of an upload, also used for each listing entry.

    Serialized with camelCase keys (``fileName``, ``containerName``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = Field(description="Human-readable outcome")
    file_name: str = Field(description="Blob key as stored in the container")
    container_name: str = Field(description="Container holding the blob")
    url: str = Field(description="Temporary read-only signed URL")


# A listing entry has exactly the upload response shape.
ListingEntry = UploadResponse
