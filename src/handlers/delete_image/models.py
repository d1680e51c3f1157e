"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file_name: str = Field(
        ...,
        min_length=1,
        description="Stored file name to delete",
    )
    target_dir: str | None = Field(
        None,
        description="Directory holding the file; current target dir when omitted",
    )


class DeleteImageResponse(BaseModel):
    """Response model for an image deletion attempt."""

    file_name: str = Field(..., description="File name that was requested")
    deleted: bool = Field(..., description="Whether the store confirmed the delete")
    message: str = Field(..., description="Outcome message")
