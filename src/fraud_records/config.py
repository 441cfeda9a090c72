"""Settings for fraud-records, read from the environment (and ``.env``)."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_NARRATIVE_MODEL = "anthropic/claude-sonnet-4"

# Narrative presets trade reply quality for latency and cost
PRESETS: dict[str, dict] = {
    "fast": {
        "model": "google/gemini-2.0-flash-001",
        "max_tokens": 400,
        "description": "Fastest & cheapest. Short acknowledgments.",
    },
    "balanced": {
        "model": "openai/gpt-4o-mini",
        "max_tokens": 700,
        "description": "Good quality/cost ratio for day-to-day reporting.",
    },
    "thorough": {
        "model": DEFAULT_NARRATIVE_MODEL,
        "max_tokens": 1000,
        "description": "Highest quality analysis. Default.",
    },
}


def get_preset(name: str) -> dict:
    """Look up a narrative preset.

    Raises:
        ValueError: For a name that is not in ``PRESETS``.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Choose one of: {', '.join(sorted(PRESETS))}"
        ) from None


def list_presets() -> dict[str, dict]:
    return dict(PRESETS)


@dataclass
class Config:
    """Runtime settings; each field falls back to its environment variable."""

    # OpenRouter
    openrouter_api_key: str = field(
        default_factory=lambda: os.getenv("OPENROUTER_API_KEY", "")
    )

    # Narrative generation
    narrative_model: str = field(
        default_factory=lambda: os.getenv("NARRATIVE_MODEL", DEFAULT_NARRATIVE_MODEL)
    )
    temperature: float = field(
        default_factory=lambda: float(os.getenv("NARRATIVE_TEMPERATURE", "0.2"))
    )
    max_tokens: int = field(
        default_factory=lambda: int(os.getenv("NARRATIVE_MAX_TOKENS", "1000"))
    )
    generator_timeout: float = field(
        default_factory=lambda: float(os.getenv("GENERATOR_TIMEOUT", "60"))
    )

    # Storage (empty path keeps records in memory)
    store_path: str = field(
        default_factory=lambda: os.getenv("FRAUD_STORE_PATH", "")
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )

    @property
    def persistent(self) -> bool:
        return bool(self.store_path.strip())

    def apply_preset(self, name: str) -> dict:
        """Switch the narrative model and token budget to a preset's values."""
        preset = get_preset(name)
        self.narrative_model = preset["model"]
        self.max_tokens = preset["max_tokens"]
        return preset

    def validate(self) -> list[str]:
        """Problems that keep the service from working as configured."""
        issues = []
        if not self.openrouter_api_key:
            issues.append(
                "OPENROUTER_API_KEY is required for AI responses "
                "(fallback text is used without it)"
            )
        if not self.narrative_model.strip():
            issues.append("NARRATIVE_MODEL must not be empty")
        for name, value in (
            ("GENERATOR_TIMEOUT", self.generator_timeout),
            ("NARRATIVE_MAX_TOKENS", self.max_tokens),
        ):
            if value <= 0:
                issues.append(f"{name} must be positive, got {value}")
        return issues
