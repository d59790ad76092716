from agenticv.schemas.uploads import UploadDeleteResponse, UploadRequest, UploadResult
from agenticv.schemas.webhooks import AnalysisPayload, AnalyzeResponse, ForwardResponse

__all__ = [
    "UploadRequest",
    "UploadResult",
    "UploadDeleteResponse",
    "AnalysisPayload",
    "ForwardResponse",
    "AnalyzeResponse",
]
