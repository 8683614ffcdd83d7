# app/services/processing_service.py
import math
from typing import Dict, Any, List, Optional

from app.models import FieldMetric, LabMetrics, Report

# (key, label, loadingExperience.metrics entry)
FIELD_METRICS = [
    ("CLS", "Cumulative Layout Shift", "CUMULATIVE_LAYOUT_SHIFT_SCORE"),
    ("TTFB", "Time to First Byte", "EXPERIMENTAL_TIME_TO_FIRST_BYTE"),
    ("FCP", "First Contentful Paint", "FIRST_CONTENTFUL_PAINT_MS"),
]

# LabMetrics attribute -> lighthouseResult.categories entry
LAB_CATEGORIES = {
    "performance": "performance",
    "seo": "seo",
    "accessibility": "accessibility",
    "bestPractices": "best-practices",
}

# LabMetrics attribute -> lighthouseResult.audits entry
LAB_TIMINGS = {
    "FCP": "first-contentful-paint",
    "LCP": "largest-contentful-paint",
}

SUGGESTIONS = {
    "performance_poor": "Reduce JavaScript bundle size (code-split or tree-shake), and enable gzip/Brotli compression.",
    "performance_average": "Defer non-critical JavaScript and CSS, and use a CDN to serve static assets faster.",
    "seo": "Ensure each page has a unique title (< 60 chars) and meta description (≈ 150 chars).",
    "accessibility": "Add appropriate ARIA labels, ensure form controls have associated labels, and provide alt text for all images.",
    "best_practices": "Serve images in modern formats (WebP/AVIF), and avoid deprecated APIs (check console warnings).",
    "ttfb": "Improve server response time by caching at the CDN or upgrading your hosting plan.",
    "cls": "Prevent layout shifts by reserving space for images and embeds via explicit width & height.",
}

def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}

def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value

def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None

def to_percent(score: Any) -> Optional[int]:
    """Converts a 0-1 Lighthouse score to a 0-100 integer, rounding halves up."""
    score = _as_number(score)
    if score is None:
        return None
    return int(math.floor(score * 100 + 0.5))

def extract_field_metrics(data: Dict[str, Any]) -> Optional[List[FieldMetric]]:
    """
    Extracts the real-user (CrUX) metrics from a PageSpeed Insights response.

    Args:
        data: The parsed JSON response from the API.

    Returns:
        CLS, TTFB and FCP in that order, or None when the response carries no
        field data for the URL. A sub-metric missing from the response keeps
        its slot with value and category set to None.
    """
    metrics = _as_dict(data.get("loadingExperience")).get("metrics")
    if not isinstance(metrics, dict) or not metrics:
        return None

    extracted = []
    for key, label, source in FIELD_METRICS:
        entry = _as_dict(metrics.get(source))
        extracted.append(
            FieldMetric(
                key=key,
                label=label,
                value=_as_number(entry.get("percentile")),
                category=_as_str(entry.get("category")),
            )
        )
    return extracted

def extract_lab_metrics(data: Dict[str, Any]) -> Optional[LabMetrics]:
    """
    Extracts Lighthouse category scores and lab timings.

    Args:
        data: The parsed JSON response from the API.

    Returns:
        A LabMetrics object, or None when the response has no Lighthouse categories.
    """
    lighthouse_result = _as_dict(data.get("lighthouseResult"))
    categories = lighthouse_result.get("categories")
    if not isinstance(categories, dict):
        return None
    audits = _as_dict(lighthouse_result.get("audits"))

    values: Dict[str, Any] = {}
    for attr, category_id in LAB_CATEGORIES.items():
        values[attr] = to_percent(_as_dict(categories.get(category_id)).get("score"))
    for attr, audit_id in LAB_TIMINGS.items():
        values[attr] = _as_str(_as_dict(audits.get(audit_id)).get("displayValue"))
    return LabMetrics(**values)

def build_report(data: Dict[str, Any]) -> Report:
    """Builds the full report from a raw PageSpeed Insights response."""
    if not isinstance(data, dict):
        raise TypeError("Input data must be a dictionary.")
    return Report(field=extract_field_metrics(data), lab=extract_lab_metrics(data))

def derive_suggestions(report: Report) -> List[str]:
    """
    Turns a report into improvement hints.

    Each rule is checked independently and in a fixed order, so the same report
    always yields the same list. Absent values never trigger a rule.
    """
    suggestions = []
    lab = report.lab or LabMetrics()

    # Performance hints
    if lab.performance is not None:
        if lab.performance < 50:
            suggestions.append(SUGGESTIONS["performance_poor"])
        elif lab.performance < 90:
            suggestions.append(SUGGESTIONS["performance_average"])

    # Category hints
    if lab.seo is not None and lab.seo < 100:
        suggestions.append(SUGGESTIONS["seo"])
    if lab.accessibility is not None and lab.accessibility < 100:
        suggestions.append(SUGGESTIONS["accessibility"])
    if lab.bestPractices is not None and lab.bestPractices < 100:
        suggestions.append(SUGGESTIONS["best_practices"])

    # Field hints
    ttfb = report.field_value("TTFB")
    if ttfb is not None and ttfb > 2000:
        suggestions.append(SUGGESTIONS["ttfb"])
    cls = report.field_value("CLS")
    if cls is not None and cls > 0:
        suggestions.append(SUGGESTIONS["cls"])

    return suggestions

def score_grade(score: int) -> str:
    """Lighthouse colour band for a 0-100 score."""
    if score >= 90:
        return "good"
    if score >= 50:
        return "average"
    return "poor"
