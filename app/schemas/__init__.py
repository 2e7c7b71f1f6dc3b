from app.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    CombinedMode,
    Decision,
    MediaAsset,
    Modality,
    TokenTestResponse,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "CombinedMode",
    "Decision",
    "MediaAsset",
    "Modality",
    "TokenTestResponse",
]
