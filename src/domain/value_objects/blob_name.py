"""Blob name value object."""

from __future__ import annotations

import uuid
from pathlib import PurePosixPath
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.domain.exceptions import InvalidBlobNameException

DEFAULT_SEPARATOR = "_"


class BlobName(BaseModel):
    """Value object for a collision-free blob key.

    Keys are built as ``<unique id><separator><original filename>`` so two
    uploads sharing a human-readable name never overwrite each other.

    Examples:
        >>> name = BlobName.generate("report.pdf")
        >>> name.original_filename
        'report.pdf'
        >>> str(name).endswith("_report.pdf")
        True
    """

    unique_id: Annotated[str, Field(min_length=1, description="Random identifier")]
    original_filename: Annotated[
        str,
        Field(min_length=1, description="Client-supplied filename"),
    ]
    separator: str = DEFAULT_SEPARATOR

    model_config = ConfigDict(frozen=True)

    @classmethod
    def generate(
        cls,
        filename: str | None,
        separator: str = DEFAULT_SEPARATOR,
    ) -> BlobName:
        """Create a blob name for a freshly uploaded file.

        Only the last path component of ``filename`` is kept, since clients
        may send full paths in multipart headers.

        Args:
            filename: Filename as sent by the client.
            separator: String placed between identifier and filename.

        Returns:
            A new BlobName with a random identifier.

        Raises:
            InvalidBlobNameException: If no usable filename remains.
        """
        if not filename or not filename.strip():
            raise InvalidBlobNameException(str(filename), "Filename cannot be empty")

        basename = PurePosixPath(filename.strip().replace("\\", "/")).name
        if not basename or basename in (".", ".."):
            raise InvalidBlobNameException(filename, "Filename has no base name")

        return cls(
            unique_id=uuid.uuid4().hex,
            original_filename=basename,
            separator=separator,
        )

    @property
    def value(self) -> str:
        """Full key as stored at the provider."""
        return f"{self.unique_id}{self.separator}{self.original_filename}"

    def __str__(self) -> str:
        return self.value
