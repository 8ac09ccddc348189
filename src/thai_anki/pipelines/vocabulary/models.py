"""
Data models describing a run of the vocabulary deck pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class PipelineStage(str, Enum):
    """Linear pipeline states; FAILED is the only non-linear transition."""
    PENDING = "pending"
    EXTRACTING = "extracting"
    NORMALIZING = "normalizing"
    SEGMENTING = "segmenting"
    AGGREGATING = "aggregating"
    RESOLVING = "resolving"
    BUILDING = "building"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Summary of a finished run."""
    source: Path
    output_path: Optional[Path] = None
    cards_json_path: Optional[Path] = None
    token_count: int = 0
    unique_words: int = 0
    resolved_definitions: int = 0
    stage: PipelineStage = PipelineStage.PENDING
    history: List[PipelineStage] = field(default_factory=list)
