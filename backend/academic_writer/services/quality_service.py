"""Quality estimation for generated papers.

``SyntheticQualityEstimator`` stands in for a real plagiarism / AI-detection
service: scores are drawn at random inside fixed ranges. Any replacement must
implement ``QualityEstimator`` and keep the report shape and bucket
thresholds.

Score ranges:
- plagiarism: [0, 15)
- AI detection: [0, 25)
- readability: [75, 95)
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional, Protocol

from academic_writer.models import QualityIndicators, QualityLevel, QualityReport

logger = logging.getLogger(__name__)

PLAGIARISM_MAX = 15.0
AI_DETECTION_MAX = 25.0
READABILITY_MIN = 75.0
READABILITY_SPAN = 20.0

# (threshold, level) pairs, checked in order
REVERSE_THRESHOLDS = ((10, QualityLevel.excellent), (20, QualityLevel.good), (35, QualityLevel.fair))
NORMAL_THRESHOLDS = ((85, QualityLevel.excellent), (70, QualityLevel.good), (55, QualityLevel.fair))


def quality_level(score: float, reverse: bool = False) -> QualityLevel:
    """Bucket a score into excellent/good/fair/poor.

    Args:
        score: Numeric score.
        reverse: True when lower is better (plagiarism, AI detection).
    """
    if reverse:
        for threshold, level in REVERSE_THRESHOLDS:
            if score < threshold:
                return level
    else:
        for threshold, level in NORMAL_THRESHOLDS:
            if score > threshold:
                return level
    return QualityLevel.poor


class QualityEstimator(Protocol):
    """Anything that can score a finished paper."""

    async def estimate(self, content: str) -> QualityReport:
        ...


class SyntheticQualityEstimator:
    """Random-draw estimator with an optional simulated analysis delay.

    Content is not inspected. This stage never fails.
    """

    def __init__(self, rng: Optional[random.Random] = None, delay_seconds: float = 0.0):
        self._rng = rng or random.Random()
        self._delay_seconds = delay_seconds

    async def estimate(self, content: str) -> QualityReport:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)

        plagiarism = self._rng.random() * PLAGIARISM_MAX
        ai_detection = self._rng.random() * AI_DETECTION_MAX
        readability = READABILITY_MIN + self._rng.random() * READABILITY_SPAN

        # Buckets use the unrounded draws; only the reported numbers are rounded
        report = QualityReport(
            plagiarism_score=round(plagiarism, 1),
            ai_detection_score=round(ai_detection, 1),
            readability_score=round(readability, 1),
            indicators=QualityIndicators(
                originality_level=quality_level(plagiarism, reverse=True),
                human_like_score=quality_level(ai_detection, reverse=True),
                academic_quality=quality_level(readability),
            ),
        )
        logger.debug(
            "Quality estimate produced",
            extra={
                "plagiarism_score": report.plagiarism_score,
                "ai_detection_score": report.ai_detection_score,
                "readability_score": report.readability_score,
            },
        )
        return report
