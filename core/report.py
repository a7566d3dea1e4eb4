"""
Text report for a suitability analysis.
"""

import math
from typing import List

from core.models import CategoryScore, SuitabilityAnalysis


def _score_line(score: CategoryScore) -> str:
    parts = [f"{name} {value}/10" for name, value in score.subscores.items()]
    return "• Scores: " + ", ".join(parts)


def _percent(value: float) -> int:
    """Whole percent, halves rounded up."""
    return int(math.floor(value + 0.5))


def _suitability_line(label: str, score: CategoryScore) -> str:
    return (
        f"• {label}: {score.tier.value} "
        f"({score.total}/{score.max_score}, {_percent(score.suitability_percent)}%)"
    )


def render_report(analysis: SuitabilityAnalysis) -> str:
    """
    Render the analysis as a fixed-layout text block.

    Sections with no entries (strengths, limitations, data gaps) are omitted.
    """
    coord = analysis.coordinate
    climate = analysis.climate.measurement
    soil = analysis.soil.measurement
    terrain = analysis.terrain.measurement
    overall = analysis.overall

    lines: List[str] = [
        "📍 QUINOA CULTIVATION SUITABILITY ANALYSIS",
        f"Location: {coord.latitude:.4f}°, {coord.longitude:.4f}°",
        f"Period: {analysis.window.start.isoformat()} to {analysis.window.end.isoformat()}",
        "",
        "🌡️ CLIMATE",
        f"• Mean temperature: {climate.temperature_mean:.1f}°C "
        f"(min {climate.temperature_min:.1f}°C, max {climate.temperature_max:.1f}°C)",
        f"• Annual precipitation: {climate.precipitation_annual:.0f} mm "
        f"(daily mean {climate.precipitation_mean_daily:.2f} mm)",
        f"• Aridity index: {climate.aridity_index:.2f} ({climate.aridity_class})",
        f"• Solar radiation: {climate.solar_radiation_mean:.1f} MJ/m²/day",
        f"• Evapotranspiration: {climate.evapotranspiration_total:.0f} mm",
        _score_line(analysis.climate.score),
        _suitability_line("Climate suitability", analysis.climate.score),
        "",
        "🌱 SOIL",
        f"• Texture: {soil.texture.value}",
        f"• pH: {soil.ph:.1f}",
        f"• Organic matter: {soil.organic_matter:.1f} g/kg",
        f"• Drainage: {soil.drainage.value}",
        _score_line(analysis.soil.score),
        _suitability_line("Soil suitability", analysis.soil.score),
        "",
        "⛰️ TERRAIN",
        f"• Elevation: {terrain.elevation:.0f} m a.s.l.",
        f"• Slope: {terrain.slope:.1f}°",
        f"• Aspect: {terrain.aspect.value}",
        _score_line(analysis.terrain.score),
        _suitability_line("Terrain suitability", analysis.terrain.score),
        "",
        "📊 OVERALL ASSESSMENT",
        f"• Overall suitability: {overall.tier.value} ({_percent(overall.suitability_percent)}%)",
        f"• Score: {overall.total_score}/{overall.max_score}",
    ]

    if overall.strengths:
        lines.append("")
        lines.append("✅ STRENGTHS:")
        lines.extend(f"  • {s}" for s in overall.strengths)

    if overall.limitations:
        lines.append("")
        lines.append("⚠️ LIMITATIONS:")
        lines.extend(f"  • {l}" for l in overall.limitations)

    if analysis.partial_data:
        lines.append("")
        lines.append("❔ MISSING DATA (defaulted to 0):")
        lines.extend(f"  • {m}" for m in analysis.missing_measurements)

    lines.append("")
    lines.append("💡 RECOMMENDATION:")
    lines.append(overall.recommendation)

    return "\n".join(lines)
