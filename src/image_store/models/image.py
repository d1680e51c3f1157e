"""Value objects passed through the save and read paths."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictStr


class UploadRequest(BaseModel):
    """One incoming image; lives for the duration of a single save."""

    path: StrictStr = Field(..., description="Temporary file holding the upload")
    name: StrictStr = Field(..., description="Original file name, used for naming")
    type: StrictStr = Field(..., description="Declared content type")


class ReadOptions(BaseModel):
    """Options accepted by ``read``; handed verbatim to the local fallback."""

    path: StrictStr = ""


class ImageDimensions(BaseModel):
    """Target size of a derivative. Absent sides keep the aspect ratio."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    width: int | None = None
    height: int | None = None

    @property
    def tag(self) -> str:
        """Directory segment such as ``w300h200``."""
        return (f"w{self.width}" if self.width else "") + (
            f"h{self.height}" if self.height else ""
        )


class UploadDescriptor(BaseModel):
    """Everything needed for a single put into the object store."""

    model_config = ConfigDict(frozen=True)

    acl: StrictStr
    body: StrictBytes
    bucket: StrictStr
    cache_control: StrictStr
    content_type: StrictStr
    key: StrictStr
    server_side_encryption: StrictStr | None = None

    def to_params(self) -> dict[str, Any]:
        """Render as boto3 ``put_object`` keyword arguments."""
        params: dict[str, Any] = {
            "ACL": self.acl,
            "Body": self.body,
            "Bucket": self.bucket,
            "CacheControl": self.cache_control,
            "ContentType": self.content_type,
            "Key": self.key,
        }

        if self.server_side_encryption:
            params["ServerSideEncryption"] = self.server_side_encryption

        return params
