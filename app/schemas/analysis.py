from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Modality(str, Enum):
    MEDIA = "media"
    VOICE = "voice"
    TEXT = "text"
    LOCATION = "location"
    COMBINED = "combined"


class CombinedMode(str, Enum):
    BOTH = "both"
    MEDIA_ONLY = "media-only"
    TEXT_ONLY = "text-only"


Verdict = Literal["real", "deepfake"]


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------


class MediaAsset(BaseModel):
    name: str
    mime_type: str
    size: int
    content: bytes = b""

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/")

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class AnalysisRequest(BaseModel):
    modality: Modality
    asset: Optional[MediaAsset] = None
    text: Optional[str] = None
    sub_mode: Optional[CombinedMode] = None


# ---------------------------------------------------------------------------
# Signals and artifacts
# ---------------------------------------------------------------------------


class SuspicionSignal(BaseModel):
    name: str
    weight: float
    evidence: str


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class BoundingBox(BaseModel):
    x: float
    y: float
    width: float
    height: float


class AttentionRegion(BoundingBox):
    confidence: float
    reason: str


class FrameProbability(BaseModel):
    frame: int
    timestamp: float
    probability: float
    issues: List[str]


class AudioSegment(BaseModel):
    start_time: float
    end_time: float
    confidence: float
    issues: List[str]


class TextHighlight(BaseModel):
    start: int
    end: int
    text: str
    confidence: float
    reason: str


class GeneratorFingerprint(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    probability: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    characteristics: List[str]


class LinguisticPattern(BaseModel):
    pattern_type: str
    description: str
    confidence: float
    examples: List[str]


class AIFingerprint(BaseModel):
    detected_models: List[GeneratorFingerprint]
    linguistic_patterns: List[LinguisticPattern]
    generation_confidence: float
    human_likelihood: float


class FrequencyRange(BaseModel):
    min: int
    max: int


class EngineProbability(BaseModel):
    engine_name: str
    probability: float
    characteristics: List[str]


class SignaturePattern(BaseModel):
    pattern_name: str
    description: str
    confidence: float
    frequency_range: Optional[FrequencyRange] = None


class VoiceEngineDetection(BaseModel):
    detected_engine: str
    confidence: float
    engine_probabilities: List[EngineProbability]
    signature_patterns: List[SignaturePattern]
    synthesis_artifacts: List[str]


class LocationClaim(BaseModel):
    text: str
    location_name: str
    coordinates: Optional[Coordinates] = None
    confidence: float
    source: Literal["ocr", "transcript", "metadata"]


class VisualLandmark(BaseModel):
    landmark_name: str
    confidence: float
    coordinates: Optional[Coordinates] = None
    bounding_box: BoundingBox


class Discrepancy(BaseModel):
    type: Literal["text_visual_mismatch", "impossible_geography", "landmark_inconsistency"]
    description: str
    severity: Literal["low", "medium", "high"]
    evidence: List[str]


class LocationAnalysis(BaseModel):
    extracted_locations: List[LocationClaim]
    visual_landmarks: List[VisualLandmark]
    consistency_score: float
    discrepancies: List[Discrepancy]


# ---------------------------------------------------------------------------
# Scoring output
# ---------------------------------------------------------------------------


class Decision(BaseModel):
    """Verdict of one aggregation rule, before the explanation is attached."""
    result: Verdict
    confidence: int = Field(ge=0, le=100)
    issues: List[str]


# ---------------------------------------------------------------------------
# Explanation payload, one variant per modality keyed by analysis_type
# ---------------------------------------------------------------------------


class _ExplanationBase(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_used: str
    processing_time: float


class MediaExplanation(_ExplanationBase):
    analysis_type: Literal["media"] = "media"
    attention_regions: List[AttentionRegion] = []


class VoiceExplanation(_ExplanationBase):
    analysis_type: Literal["voice"] = "voice"
    audio_segments: List[AudioSegment] = []
    voice_engine: VoiceEngineDetection


class TextExplanation(_ExplanationBase):
    analysis_type: Literal["text"] = "text"
    ai_fingerprint: AIFingerprint


class LocationExplanation(_ExplanationBase):
    analysis_type: Literal["location"] = "location"
    location_analysis: LocationAnalysis


class CombinedExplanation(_ExplanationBase):
    analysis_type: Literal["combined"] = "combined"
    sub_mode: CombinedMode
    attention_regions: List[AttentionRegion] = []
    frame_probabilities: List[FrameProbability] = []
    text_highlights: List[TextHighlight] = []
    media_confidence: int = 0
    text_confidence: int = 0
    location_analysis: Optional[LocationAnalysis] = None


ExplanationData = Annotated[
    Union[
        MediaExplanation,
        VoiceExplanation,
        TextExplanation,
        LocationExplanation,
        CombinedExplanation,
    ],
    Field(discriminator="analysis_type"),
]


class AnalysisResult(BaseModel):
    """
    Uniform result envelope.

    `confidence` measures the magnitude of suspicion found by the pipeline;
    it is not the probability of the reported label. A clean "real" result
    and a borderline "deepfake" result can report similar values.
    """
    result: Verdict
    confidence: int = Field(ge=0, le=100)
    issues_detected: List[str]
    analysis_type: Modality
    explanation_data: ExplanationData
    processing_time: float
    report_id: Optional[str] = None
    ai_fingerprint: Optional[AIFingerprint] = None
    voice_engine: Optional[VoiceEngineDetection] = None
    location_analysis: Optional[LocationAnalysis] = None


class TokenTestResponse(BaseModel):
    valid: bool
    message: str
    timestamp: str
