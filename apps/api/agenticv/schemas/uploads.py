from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class UploadRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str = Field(min_length=1)
    mime_type: str
    size_bytes: int = Field(ge=0)
    raw_bytes: bytes = Field(repr=False)

    @model_validator(mode="after")
    def _size_matches_content(self) -> "UploadRequest":
        if self.size_bytes != len(self.raw_bytes):
            raise ValueError(
                f"size_bytes ({self.size_bytes}) does not match the file content ({len(self.raw_bytes)} bytes)"
            )
        return self


class UploadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    storage_path: str
    public_url: str
    bucket: str
    file_name: str
    mime_type: str
    size_bytes: int
    uploaded_at: datetime


class UploadDeleteResponse(BaseModel):
    storage_path: str
    deleted: bool
