"""
Suitability Aggregator for quinoa cultivation analysis.
Combines the category scores into an overall tier with explainable
strengths and limitations.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

from core.models import CategoryScore, OverallAssessment, OverallTier

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CriterionCheck:
    """
    A sub-score test that feeds the strengths/limitations lists.

    Sub-score below `weak` is a limitation, at or above `strong` a strength,
    anything in between contributes nothing.
    """
    category: str
    criterion: str
    weak: int
    strong: int
    limitation: str
    strength: str


# Display order is the order below
CRITERION_CHECKS = [
    CriterionCheck("climate", "temperature", 7, 9,
                   "Temperature outside the optimal range",
                   "Adequate temperature"),
    CriterionCheck("climate", "precipitation", 7, 9,
                   "Insufficient or excessive precipitation",
                   "Adequate precipitation"),
    CriterionCheck("terrain", "elevation", 7, 9,
                   "Elevation not ideal",
                   "Optimal elevation for quinoa"),
    CriterionCheck("terrain", "slope", 6, 8,
                   "Steep slope",
                   "Favorable topography"),
    CriterionCheck("soil", "ph", 6, 9,
                   "Soil pH not optimal",
                   "Adequate soil pH"),
    CriterionCheck("soil", "drainage", 6, 9,
                   "Poor drainage",
                   "Good soil drainage"),
]

# (minimum percent, tier), highest first; boundaries are inclusive
OVERALL_TIERS = [
    (80.0, OverallTier.HIGHLY_SUITABLE),
    (65.0, OverallTier.SUITABLE),
    (50.0, OverallTier.MODERATELY_SUITABLE),
    (35.0, OverallTier.MARGINALLY_SUITABLE),
]

RECOMMENDATIONS: Dict[OverallTier, str] = {
    OverallTier.HIGHLY_SUITABLE: (
        "Excellent location for quinoa cultivation. "
        "Optimal conditions across most variables."
    ),
    OverallTier.SUITABLE: (
        "Good location for quinoa. "
        "Some variables can be improved with agronomic management."
    ),
    OverallTier.MODERATELY_SUITABLE: (
        "Moderately suitable location. "
        "Requires careful management and possible soil improvements."
    ),
    OverallTier.MARGINALLY_SUITABLE: (
        "Marginally suitable location. High risk of low yields. "
        "Consider resistant varieties."
    ),
    OverallTier.UNSUITABLE: (
        "Location not recommended for quinoa. "
        "Consider other crops better adapted to these conditions."
    ),
}


def classify_overall(percent: float) -> OverallTier:
    """Classify an overall percentage into the 5-tier ladder."""
    for minimum, tier in OVERALL_TIERS:
        if percent >= minimum:
            return tier
    return OverallTier.UNSUITABLE


class SuitabilityAggregator:
    """
    Reduces the three category scores to one overall assessment.
    Stateless; safe to share between threads.
    """

    def aggregate(
        self,
        climate: CategoryScore,
        soil: CategoryScore,
        terrain: CategoryScore,
    ) -> OverallAssessment:
        """
        Combine category totals into the overall assessment.

        Returns:
            OverallAssessment with tier, recommendation, strengths and limitations
        """
        total = climate.total + soil.total + terrain.total
        max_score = climate.max_score + soil.max_score + terrain.max_score
        percent = 100.0 * total / max_score
        tier = classify_overall(percent)

        strengths, limitations = self.explain(
            {"climate": climate, "soil": soil, "terrain": terrain}
        )

        log.debug(f"Overall score {total}/{max_score} ({percent:.1f}%) -> {tier.name}")

        return OverallAssessment(
            total_score=total,
            max_score=max_score,
            suitability_percent=percent,
            tier=tier,
            recommendation=RECOMMENDATIONS[tier],
            strengths=strengths,
            limitations=limitations,
        )

    def explain(self, categories: Dict[str, CategoryScore]):
        """Run the criterion checks in display order. Returns (strengths, limitations)."""
        strengths: List[str] = []
        limitations: List[str] = []

        for check in CRITERION_CHECKS:
            value = categories[check.category].subscores[check.criterion]
            if value < check.weak:
                limitations.append(check.limitation)
            elif value >= check.strong:
                strengths.append(check.strength)

        return strengths, limitations
