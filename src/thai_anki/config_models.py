from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from thai_anki.common.errors import ConfigurationError

DeckMode = Literal["definitions", "counts-only"]

DICTIONARY_ENV_VAR = "THAI_ANKI_DICTIONARY"
DEFAULT_PLACEHOLDER = "(no definition)"


class LookupConfig(BaseModel):
    """How the definition resolver talks to the dictionary.

    - max_concurrent_lookups: 1 keeps lookups strictly sequential in ranked order
    - lookup_timeout_seconds: per-attempt bound; expiry counts as a failed lookup
    """
    max_concurrent_lookups: int = Field(default=1, ge=1, le=64, description="Lookups in flight at once")
    lookup_timeout_seconds: float | None = Field(default=10.0, gt=0, description="Per-lookup timeout in seconds")
    max_retries: int = Field(default=0, ge=0, le=5, description="Retries after a failed lookup")
    backoff_initial_seconds: float = Field(default=0.5, gt=0, description="Initial backoff delay in seconds")
    backoff_multiplier: float = Field(default=2.0, gt=1.0, description="Exponential backoff multiplier")


class DeckPipelineConfig(BaseModel):
    """Configuration for the document → Anki deck pipeline.

    - mode: "definitions" puts dictionary definitions on the back of each card,
      "counts-only" puts the word's occurrence count there instead
    - dictionary_path: LEXiTRON-style lexicon (.json, .jsonl or .jsonl.gz);
      required in definitions mode
    """

    mode: DeckMode = Field(default="definitions", description="Back-of-card content")
    dictionary_path: Path | None = Field(default=None, description="Path to the Thai-English lexicon file")
    segmenter_engine: str = Field(default="newmm", description="PyThaiNLP word_tokenize engine")
    lookup: LookupConfig = Field(default_factory=LookupConfig)
    placeholder: str = Field(default=DEFAULT_PLACEHOLDER, description="Back text for words without a definition")
    count_format: str = Field(default="{count} occurrences", description="Back text template in counts-only mode")
    export_json: bool = Field(default=False, description="Also dump the cards as JSON next to the package")

    @model_validator(mode="after")
    def _check_mode_requirements(self) -> "DeckPipelineConfig":
        if self.mode == "definitions" and self.dictionary_path is None:
            env_path = os.getenv(DICTIONARY_ENV_VAR)
            if not env_path:
                raise ValueError(
                    "dictionary_path is required in definitions mode "
                    f"(set it in the config, pass --dictionary or export {DICTIONARY_ENV_VAR})"
                )
            self.dictionary_path = Path(env_path)
        if "{count}" not in self.count_format:
            raise ValueError("count_format must contain the {count} placeholder")
        return self


def load_config(path: Optional[Path] = None, **overrides) -> DeckPipelineConfig:
    """Load the pipeline configuration from YAML and apply CLI overrides.

    Overrides with a value of None are ignored. Keys under ``lookup`` may be
    given flat (``max_concurrent_lookups=4``) and are routed to LookupConfig.
    """
    raw: dict = {}
    if path is not None:
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

    lookup_raw = dict(raw.get("lookup") or {})
    for key, value in overrides.items():
        if value is None:
            continue
        if key in LookupConfig.model_fields:
            lookup_raw[key] = value
        else:
            raw[key] = value
    raw["lookup"] = lookup_raw

    try:
        return DeckPipelineConfig.model_validate(raw)
    except ValidationError as ve:
        source = path or "command line"
        raise ConfigurationError(f"Invalid configuration in {source}:\n{ve}") from ve
