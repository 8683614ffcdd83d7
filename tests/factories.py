PSI_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


def psi_payload(
    performance=0.42,
    seo=1.0,
    accessibility=1.0,
    best_practices=1.0,
    field_metrics=None,
):
    """A trimmed-down PageSpeed Insights response."""
    data = {
        "id": "https://example.com/",
        "lighthouseResult": {
            "categories": {
                "performance": {"score": performance},
                "seo": {"score": seo},
                "accessibility": {"score": accessibility},
                "best-practices": {"score": best_practices},
            },
            "audits": {
                "first-contentful-paint": {"displayValue": "1.2 s"},
                "largest-contentful-paint": {"displayValue": "2.5 s"},
            },
        },
    }
    if field_metrics is not None:
        data["loadingExperience"] = {"metrics": field_metrics}
    return data


def field_metrics(cls=5, ttfb=800, fcp=1500):
    return {
        "CUMULATIVE_LAYOUT_SHIFT_SCORE": {"percentile": cls, "category": "FAST"},
        "EXPERIMENTAL_TIME_TO_FIRST_BYTE": {"percentile": ttfb, "category": "AVERAGE"},
        "FIRST_CONTENTFUL_PAINT_MS": {"percentile": fcp, "category": "FAST"},
    }
