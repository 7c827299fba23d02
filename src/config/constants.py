ENDPOINTS: dict[str, str] = {
    "verify": "/extension/verify",
    "validate": "/extension/validate",
    "status": "/extension/status",
    "job": "/extension/job/{job_id}",
    "job_details": "/extension/job/{job_id}/details",
    "scans": "/extension/scans",
    "history": "/extension/history",
}

# Core Web Vitals thresholds (ms unless unit is empty)
WEB_VITALS_THRESHOLDS: dict[str, dict[str, float | str]] = {
    "lcp": {"good": 2500, "poor": 4000, "unit": "ms", "label": "LCP (Largest Contentful Paint)"},
    "fcp": {"good": 1800, "poor": 3000, "unit": "ms", "label": "FCP (First Contentful Paint)"},
    "ttfb": {"good": 800, "poor": 1800, "unit": "ms", "label": "TTFB (Time to First Byte)"},
    "cls": {"good": 0.1, "poor": 0.25, "unit": "", "label": "CLS (Cumulative Layout Shift)"},
    "tti": {"good": 3800, "poor": 7300, "unit": "ms", "label": "TTI (Time to Interactive)"},
}

STATE_DISPLAY: dict[str, dict[str, str]] = {
    "perfect": {
        "label": "Perfect",
        "color": "#22c55e",
        "emoji": "🟢",
        "description": "Site is fully reachable and highly usable",
    },
    "good": {
        "label": "Good",
        "color": "#eab308",
        "emoji": "🟡",
        "description": "Site is reachable with acceptable performance",
    },
    "degraded": {
        "label": "Degraded",
        "color": "#f97316",
        "emoji": "🟠",
        "description": "Site has reachability or performance issues",
    },
    "down": {
        "label": "Down",
        "color": "#ef4444",
        "emoji": "🔴",
        "description": "Site is unreachable or severely degraded",
    },
}

CONTINENT_DISPLAY: dict[str, dict[str, str]] = {
    "NA": {"label": "North America", "flag": "🇺🇸"},
    "EU": {"label": "Europe", "flag": "🇪🇺"},
    "AS": {"label": "Asia", "flag": "🇯🇵"},
    "AF": {"label": "Africa", "flag": "🇿🇦"},
    "OC": {"label": "Oceania", "flag": "🇦🇺"},
    "SA": {"label": "South America", "flag": "🇧🇷"},
}

# Health-state score thresholds
DOWN_REACHABILITY_BELOW = 60
PERFECT_USABILITY_MIN = 91
GOOD_USABILITY_MIN = 76

MAX_BATCH_URLS = 10
MAX_HISTORY_LIMIT = 50
