"""
Signal dictionaries and decision policies shared by the extractors.

Weights are hand-tuned; their relative ordering and the thresholds are what
the rest of the engine depends on.
"""

import re
from typing import NamedTuple


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

AI_TOOL_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"generated", r"ai", r"synthetic", r"fake", r"deepfake",
        r"veo", r"sora", r"runway", r"midjourney", r"dalle",
        r"stable.*diffusion", r"gemini",
    )
]

VIDEO_BIAS_ISSUES = [
    "Temporal inconsistencies in motion blur",
    "Unnatural lighting transitions",
    "Inconsistent shadow rendering",
]

IMAGE_BIAS_ISSUES = [
    "Pixel-level artifacts in facial regions",
    "Inconsistent texture patterns",
]


class MediaPolicy(NamedTuple):
    """Weights and thresholds for one media pipeline variant.

    video_bias / image_bias are added to every asset of that kind regardless
    of content. With the standard table every video lands above the deepfake
    threshold on its own; keep that visible here rather than in the scorer.
    """
    name: str
    filename_weight: float
    compression_weight: float
    video_bias: float
    image_bias: float
    compression_min_mb: float
    compression_max_mb: float
    deepfake_threshold: float
    base_confidence: float
    confidence_cap: float
    max_issues: int
    attention_threshold: float
    second_region_threshold: float


STANDARD_MEDIA_POLICY = MediaPolicy(
    name="standard",
    filename_weight=25,
    compression_weight=15,
    video_bias=30,
    image_bias=20,
    compression_min_mb=0.5,
    compression_max_mb=50,
    deepfake_threshold=25,
    base_confidence=50,
    confidence_cap=95,
    max_issues=3,
    attention_threshold=25,
    second_region_threshold=40,
)

COMBINED_MEDIA_POLICY = STANDARD_MEDIA_POLICY._replace(
    name="combined",
    filename_weight=30,
    compression_weight=20,
    attention_threshold=20,
)

ATTENTION_REASONS = (
    "Facial inconsistencies detected",
    "Unnatural lighting patterns",
)


# ---------------------------------------------------------------------------
# AI-authorship text
# ---------------------------------------------------------------------------

FORMAL_TRANSITIONS = [
    "furthermore", "moreover", "additionally", "consequently", "therefore",
    "in conclusion", "to summarize", "it is important to note", "it should be noted",
]

EXPLANATORY_PHRASES = [
    "it is worth noting", "it is essential to understand", "it is crucial to",
    "one must consider", "it becomes clear that", "this highlights the importance",
]

HEDGING_PHRASES = [
    "i appreciate", "i understand", "that said", "to be fair",
    "it's worth considering", "from my perspective", "i think it's important",
    "i'd be happy to", "i hope this helps",
]

PERSONAL_MARKERS = [
    "i remember", "last week", "yesterday", "my friend", "my experience",
    "when i was", "i once", "personally", "in my case",
]

TYPO_PATTERNS = [
    re.compile(r"\b(teh|hte|adn|nad|taht|thier|recieve|seperate)\b", re.IGNORECASE),
    re.compile(r"\.{2,}|!{2,}|\?{2,}"),
]


class TextFamily(NamedTuple):
    model_name: str
    confidence: float


FAMILY_FORMAL = TextFamily("GPT (OpenAI)", 0.8)
FAMILY_HEDGING = TextFamily("Claude (Anthropic)", 0.75)
FAMILY_TERSE = TextFamily("LLaMA (Meta)", 0.7)

FORMAL_SENTENCE_BAND = (15, 25)
FORMAL_SENTENCE_WEIGHT = 20
FORMAL_TRANSITION_MIN = 3
FORMAL_TRANSITION_WEIGHT = 25
EXPLANATORY_MIN = 2
EXPLANATORY_WEIGHT = 20
HEDGING_MIN = 2
HEDGING_WEIGHT = 30
TERSE_MAX_WORD_LENGTH = 5.5
TERSE_MAX_SENTENCE_WORDS = 18
TERSE_WEIGHT = 15

REPEATED_OPENING_MIN = 3
IMPERSONAL_MIN_CHARS = 200
TOO_CLEAN_MIN_CHARS = 100
FAMILY_PROBABILITY_CAP = 0.95
TEXT_DEEPFAKE_THRESHOLD = 0.40


# ---------------------------------------------------------------------------
# Misinformation (combined mode)
# ---------------------------------------------------------------------------

class MisinformationRule(NamedTuple):
    pattern: re.Pattern
    reason: str
    weight: float


MISINFORMATION_RULES = [
    MisinformationRule(re.compile(r"breaking|urgent|exclusive|leaked", re.IGNORECASE),
                       "Sensationalist language", 10),
    MisinformationRule(re.compile(r"they don't want you to know|hidden truth|cover.*up", re.IGNORECASE),
                       "Conspiracy language", 20),
    MisinformationRule(re.compile(r"100%|completely|totally|absolutely", re.IGNORECASE),
                       "Absolute claims without evidence", 15),
    MisinformationRule(re.compile(r"scientists say|experts claim|studies show", re.IGNORECASE),
                       "Vague authority claims", 12),
    MisinformationRule(re.compile(r"miracle|amazing|shocking|unbelievable", re.IGNORECASE),
                       "Emotional manipulation", 8),
    MisinformationRule(re.compile(r"fake news|mainstream media|deep state", re.IGNORECASE),
                       "Anti-media rhetoric", 18),
]

DATE_PATTERN = re.compile(r"\d{4}|\d{1,2}/\d{1,2}/\d{2,4}")


class CombinedWeights(NamedTuple):
    media: float
    text: float
    cross_reference: float
    deepfake_threshold: float
    confidence_cap: float
    max_issues: int


COMBINED_WEIGHTS = CombinedWeights(
    media=0.6,
    text=0.3,
    cross_reference=0.1,
    deepfake_threshold=0.4,
    confidence_cap=95,
    max_issues=5,
)

MISSING_MEDIA_MENTION_PENALTY = 15
COORDINATED_PENALTY = 30
COORDINATED_THRESHOLD = 0.5


# ---------------------------------------------------------------------------
# Voice
# ---------------------------------------------------------------------------

AI_VOICE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"eleven.*labs", r"murf", r"speechify", r"voice.*ai", r"synthetic",
        r"generated", r"tts", r"text.*to.*speech", r"clone", r"fake",
        r"google.*tts", r"amazon.*polly", r"azure.*speech", r"coqui",
    )
]

VOICE_ENGINES = {
    "ElevenLabs": {
        "characteristics": ["High-quality neural synthesis", "Consistent prosody", "Minimal background noise"],
        "frequency_range": (80, 8000),
        "artifacts": ["Slight robotic undertones", "Perfect pronunciation"],
    },
    "Google TTS": {
        "characteristics": ["WaveNet synthesis", "Natural intonation", "Clear articulation"],
        "frequency_range": (100, 7500),
        "artifacts": ["Consistent pacing", "Lack of natural hesitations"],
    },
    "Amazon Polly": {
        "characteristics": ["Neural TTS", "Emotional range", "Multiple voice styles"],
        "frequency_range": (85, 7800),
        "artifacts": ["Slight metallic quality", "Perfect grammar pronunciation"],
    },
    "Coqui TTS": {
        "characteristics": ["Open-source synthesis", "Variable quality", "Customizable voices"],
        "frequency_range": (75, 8200),
        "artifacts": ["Occasional glitches", "Inconsistent quality"],
    },
    "Microsoft Azure": {
        "characteristics": ["Neural voices", "SSML support", "Multilingual"],
        "frequency_range": (90, 7600),
        "artifacts": ["Corporate-style delivery", "Consistent volume"],
    },
    "Murf AI": {
        "characteristics": ["Studio-quality voices", "Emotional control", "Professional tone"],
        "frequency_range": (95, 7400),
        "artifacts": ["Overly polished delivery", "Lack of natural variations"],
    },
}

GENERIC_VOICE_ARTIFACTS = [
    "Unnatural prosody patterns",
    "Lack of breathing sounds",
    "Consistent vocal quality",
]

ENGINE_FILENAME_WEIGHT = 0.4
ENGINE_JITTER = 0.2
ENGINE_LISTING_FLOOR = 0.1
ENGINE_PROBABILITY_CAP = 0.95


class VoicePolicy(NamedTuple):
    filename_weight: float
    engine_weight: float
    engine_floor: float
    engine_issue_floor: float
    segment_tag_floor: float
    short_duration_sec: float
    short_duration_weight: float
    long_duration_sec: float
    long_duration_weight: float
    bitrate_min_kbps: float
    bitrate_max_kbps: float
    bitrate_weight: float
    deepfake_threshold: float
    base_confidence: float
    confidence_cap: float
    max_issues: int


VOICE_POLICY = VoicePolicy(
    filename_weight=40,
    engine_weight=50,
    engine_floor=0.3,
    engine_issue_floor=0.5,
    segment_tag_floor=0.4,
    short_duration_sec=3,
    short_duration_weight=10,
    long_duration_sec=300,
    long_duration_weight=5,
    bitrate_min_kbps=64,
    bitrate_max_kbps=320,
    bitrate_weight=15,
    deepfake_threshold=30,
    base_confidence=60,
    confidence_cap=95,
    max_issues=5,
)

SEGMENT_ISSUE_LADDER = [
    (0.3, "Unnatural pitch variations"),
    (0.5, "Inconsistent formant frequencies"),
    (0.7, "Digital compression artifacts"),
]


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

EARTH_RADIUS_KM = 6371.0

LANDMARKS = {
    "eiffel tower": {"lat": 48.8584, "lng": 2.2945, "city": "Paris", "country": "France"},
    "statue of liberty": {"lat": 40.6892, "lng": -74.0445, "city": "New York", "country": "USA"},
    "big ben": {"lat": 51.4994, "lng": -0.1245, "city": "London", "country": "UK"},
    "colosseum": {"lat": 41.8902, "lng": 12.4922, "city": "Rome", "country": "Italy"},
    "sydney opera house": {"lat": -33.8568, "lng": 151.2153, "city": "Sydney", "country": "Australia"},
    "taj mahal": {"lat": 27.1751, "lng": 78.0421, "city": "Agra", "country": "India"},
    "christ the redeemer": {"lat": -22.9519, "lng": -43.2105, "city": "Rio de Janeiro", "country": "Brazil"},
    "machu picchu": {"lat": -13.1631, "lng": -72.5450, "city": "Cusco", "country": "Peru"},
    "golden gate bridge": {"lat": 37.8199, "lng": -122.4783, "city": "San Francisco", "country": "USA"},
    "mount fuji": {"lat": 35.3606, "lng": 138.7274, "city": "Honshu", "country": "Japan"},
}

OCR_OVERLAYS = [
    "Live from New York",
    "Breaking: London",
    "Paris, France",
    "Tokyo Update",
    "Sydney Harbour",
    "Rome, Italy",
]

OCR_PRESENCE_PROBABILITY = 0.7
LANDMARK_FALLBACK_PROBABILITY = 0.5

MATCHED_CLAIM_CONFIDENCE = 0.9
UNMATCHED_CLAIM_CONFIDENCE = 0.6

MATCH_DISTANCE_KM = 100
IMPOSSIBLE_DISTANCE_KM = 1000
LANDMARK_SPREAD_KM = 500

IMPOSSIBLE_GEOGRAPHY_PENALTY = 0.4
TEXT_VISUAL_MISMATCH_PENALTY = 0.3
LANDMARK_INCONSISTENCY_PENALTY = 0.5

LOCATION_SUSPICION_THRESHOLD = 0.6
LOCATION_SUSPICIOUS_FLOOR = 60
LOCATION_VERIFIED_CEILING = 40


# ---------------------------------------------------------------------------
# Explanation labels
# ---------------------------------------------------------------------------

MODEL_LABELS = {
    "media": "Media Heuristic Detection v2.0",
    "voice": "Advanced Voice Engine Detection v2.1",
    "text": "Advanced AI Text Detection v2.0",
    "location": "Location Verification System v1.0",
    "combined": "Combined Analysis v3.0",
}

FALLBACK_CONFIDENCE = 50

MODEL_ASSISTED_LABELS = {
    "media": "Specialized Model + Media Heuristics",
    "voice": "Wav2Vec2 + Voice Engine Detection",
    "text": "Hugging Face + Local Analysis",
}

FALLBACK_SUBJECTS = {
    "media": "Media analysis",
    "voice": "Voice analysis",
    "text": "Text analysis",
    "location": "Location verification",
    "combined": "Combined analysis",
}


# ---------------------------------------------------------------------------
# Specialized-model verdicts (optional inference)
# ---------------------------------------------------------------------------

MODEL_DEFAULT_CONFIDENCE = 75
MODEL_FAKE_THRESHOLD = 0.6
MODEL_REAL_THRESHOLD = 0.7
MODEL_FAKE_ISSUE = "AI-generated content detected by specialized model"

SPEECH_RATE_BAND = (100, 200)
SPEECH_RATE_CONFIDENCE = 80
SPEECH_RATE_ISSUE = "Unnatural speech rate detected"
