"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    MIN_TEXT_LENGTH=80 uvicorn app.main:app       # stricter AI-text gate
    export INFERENCE_API_KEY=hf_xxx                # enable external models

A `.env` file at the project root is loaded automatically.

Scoring weights and decision thresholds are NOT settings: they live in
app/detection/constants.py as named policy tables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # MIN_TEXT_LENGTH == min_text_length
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Upload ceilings (MB)                                                #
    # ------------------------------------------------------------------ #
    max_media_image_mb: int = Field(
        10, description="Max MB for images on the media endpoint"
    )
    max_media_video_mb: int = Field(
        50, description="Max MB for videos on the media endpoint"
    )
    max_voice_mb: int = Field(
        20, description="Max MB for audio on the voice endpoint"
    )
    max_location_mb: int = Field(
        100, description="Max MB for any asset on the location endpoint"
    )
    max_combined_mb: int = Field(
        100, description="Max MB for any asset on the combined endpoint"
    )

    # ------------------------------------------------------------------ #
    # Text                                                                #
    # ------------------------------------------------------------------ #
    min_text_length: int = Field(
        50, description="Minimum characters for AI-authorship text detection"
    )

    # ------------------------------------------------------------------ #
    # Voice                                                               #
    # ------------------------------------------------------------------ #
    voice_sample_rate: int = Field(
        44_100, description="Assumed sample rate (Hz) for duration estimates"
    )
    voice_bytes_per_sample: int = Field(
        2, description="Assumed sample width (16-bit) for duration estimates"
    )
    voice_segment_sec: float = Field(
        5.0, description="Window length of one audio segment (seconds)"
    )
    voice_max_segments: int = Field(
        10, description="Cap on audio segments in the explanation table"
    )

    # ------------------------------------------------------------------ #
    # Combined                                                            #
    # ------------------------------------------------------------------ #
    combined_frame_samples: int = Field(
        10, description="Frames listed in the combined-mode frame table"
    )
    combined_assumed_fps: int = Field(
        30, description="Frame rate used to label sampled frame indices"
    )

    # ------------------------------------------------------------------ #
    # Report ID                                                           #
    # ------------------------------------------------------------------ #
    report_id_length: int = Field(
        9, description="Characters in an opaque report ID (A-Z, 0-9)"
    )

    # ------------------------------------------------------------------ #
    # Redis TTLs (seconds)                                                #
    # ------------------------------------------------------------------ #
    report_cache_ttl_sec: int = Field(
        86_400, description="24 h, cached analysis payload (report:{report_id})"
    )

    # ------------------------------------------------------------------ #
    # Rate Limiting                                                       #
    # ------------------------------------------------------------------ #
    rate_limit_request_window_sec: int = Field(
        60, description="Sliding window for per-caller request rate (seconds)"
    )
    rate_limit_max_requests: int = Field(
        20, description="Max analyses allowed within the rate-limit window"
    )
    rate_limit_memory_limit: int = Field(
        1000, description="Max keys before in-memory rate-limit map is pruned"
    )

    # ------------------------------------------------------------------ #
    # Storage backends (optional)                                         #
    # ------------------------------------------------------------------ #
    firebase_service_account: str = Field(
        "", description="Service-account JSON; empty uses application default credentials"
    )
    upstash_redis_host: str = Field(
        "", description="Upstash REST URL; empty disables the report cache"
    )
    upstash_redis_password: str = Field(
        "", description="Upstash REST token"
    )

    # ------------------------------------------------------------------ #
    # External inference (optional)                                       #
    # ------------------------------------------------------------------ #
    inference_api_key: str = Field(
        "", description="Bearer token for the inference endpoint; empty disables it"
    )
    inference_base_url: str = Field(
        "https://api-inference.huggingface.co/models",
        description="Base URL; the model id is appended as a path segment",
    )
    inference_http_timeout_sec: int = Field(
        30, description="Total timeout of the shared HTTP session (seconds)"
    )
    inference_image_model: str = Field(
        "dima806/deepfake_vs_real_image_detection",
        description="Image real/fake classifier",
    )
    inference_voice_model: str = Field(
        "facebook/wav2vec2-base-960h", description="Speech recognizer for speech-rate checks"
    )
    inference_text_models: list[str] = Field(
        ["openai-detector-roberta-base", "roberta-base-openai-detector"],
        description="AI-text detectors, queried in order",
    )

    # ------------------------------------------------------------------ #
    # Derived byte-level properties (computed from MB fields)             #
    # ------------------------------------------------------------------ #
    @property
    def max_media_image_bytes(self) -> int:
        return self.max_media_image_mb * 1024 * 1024

    @property
    def max_media_video_bytes(self) -> int:
        return self.max_media_video_mb * 1024 * 1024

    @property
    def max_voice_bytes(self) -> int:
        return self.max_voice_mb * 1024 * 1024

    @property
    def max_location_bytes(self) -> int:
        return self.max_location_mb * 1024 * 1024

    @property
    def max_combined_bytes(self) -> int:
        return self.max_combined_mb * 1024 * 1024

    @property
    def inference_enabled(self) -> bool:
        return bool(self.inference_api_key)

    @property
    def redis_configured(self) -> bool:
        return bool(self.upstash_redis_host and self.upstash_redis_password)


# Single shared instance, import this everywhere.
settings = Settings()
