import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "gpt-4o-mini"


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


class GenerationConfig(BaseModel):
    """Every option the generation client understands, with its default."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    model: str = DEFAULT_MODEL
    api_key: Optional[str] = Field(default=None, repr=False)
    temperature: float = Field(default=0.6, ge=0.0, le=2.0)
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    # Not an OpenAI parameter; forwarded via extra_body for compatible servers.
    top_k: Optional[int] = Field(default=None, ge=1)
    use_grounding: bool = True

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        values = {
            "model": _env("OPENAI_MODEL"),
            "api_key": _env("OPENAI_API_KEY"),
            "temperature": _env("MATERIALS_TEMPERATURE"),
            "top_p": _env("MATERIALS_TOP_P"),
            "top_k": _env("MATERIALS_TOP_K"),
            "use_grounding": _env("MATERIALS_USE_GROUNDING"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})


class AppSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    log_path: Path = Path(".materials_activity.jsonl")
    log_capacity: int = Field(default=1000, ge=1)
    ui_log_lines: int = Field(default=50, ge=1)
    max_upload_mb: float = Field(default=5, gt=0)
    download_settle_delay: float = Field(default=0.1, ge=0)

    @classmethod
    def from_env(cls) -> "AppSettings":
        values = {
            "log_path": _env("MATERIALS_LOG_PATH"),
            "log_capacity": _env("MATERIALS_LOG_CAPACITY"),
            "max_upload_mb": _env("MATERIALS_MAX_UPLOAD_MB"),
            "download_settle_delay": _env("MATERIALS_DOWNLOAD_DELAY"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})
