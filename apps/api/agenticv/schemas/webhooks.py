from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agenticv.schemas.uploads import UploadResult


class AnalysisPayload(BaseModel):
    """Body sent to a workflow webhook; field aliases are the wire names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    public_url: str = Field(alias="publicUrl", min_length=1)
    file_name: str = Field(alias="filename", min_length=1)
    mime_type: str = Field(alias="fileType")
    size_bytes: int = Field(alias="fileSize", ge=0)
    uploaded_at: datetime = Field(alias="uploadedAt", default_factory=lambda: datetime.now(UTC))
    question: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")
    extra: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_upload(
        cls,
        result: UploadResult,
        *,
        question: str | None = None,
        session_id: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> "AnalysisPayload":
        return cls(
            public_url=result.public_url,
            file_name=result.file_name,
            mime_type=result.mime_type,
            size_bytes=result.size_bytes,
            uploaded_at=result.uploaded_at,
            question=question or None,
            session_id=session_id or None,
            extra=extra or {},
        )

    def to_wire(self) -> dict[str, Any]:
        body = {key: value for key, value in self.extra.items() if value is not None}
        body.update(self.model_dump(mode="json", by_alias=True, exclude_none=True))
        return body


class ForwardResponse(BaseModel):
    kind: str
    endpoint_url: str
    result: Any


class AnalyzeResponse(BaseModel):
    kind: str
    upload: UploadResult
    result: Any
