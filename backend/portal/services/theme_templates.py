"""Preset palettes offered when creating a theme."""

DEFAULT_COLORS: dict[str, str] = {
    "primary": "#3b82f6",
    "background": "#0f172a",
    "surface": "#1e293b",
    "accent": "#8b5cf6",
    "text": "#f8fafc",
    "text_secondary": "#cbd5e1",
    "border": "#334155",
}

THEME_TEMPLATES: list[dict] = [
    {
        "name": "Corporate Blue",
        "description": "Professional and trustworthy",
        "colors": {
            "primary": "#1e40af",
            "background": "#0f172a",
            "surface": "#1e293b",
            "accent": "#3b82f6",
            "text": "#f8fafc",
            "text_secondary": "#cbd5e1",
            "border": "#334155",
        },
    },
    {
        "name": "Tech Purple",
        "description": "Modern and innovative",
        "colors": {
            "primary": "#7c3aed",
            "background": "#18181b",
            "surface": "#27272a",
            "accent": "#a78bfa",
            "text": "#fafafa",
            "text_secondary": "#d4d4d8",
            "border": "#3f3f46",
        },
    },
    {
        "name": "Creative Orange",
        "description": "Bold and energetic",
        "colors": {
            "primary": "#ea580c",
            "background": "#1c1917",
            "surface": "#292524",
            "accent": "#fb923c",
            "text": "#fafaf9",
            "text_secondary": "#d6d3d1",
            "border": "#44403c",
        },
    },
    {
        "name": "Minimal Gray",
        "description": "Clean and sophisticated",
        "colors": {
            "primary": "#0f172a",
            "background": "#ffffff",
            "surface": "#f8fafc",
            "accent": "#475569",
            "text": "#0f172a",
            "text_secondary": "#64748b",
            "border": "#e2e8f0",
        },
    },
    {
        "name": "Forest Green",
        "description": "Natural and calming",
        "colors": {
            "primary": "#059669",
            "background": "#0c1713",
            "surface": "#1a2e25",
            "accent": "#10b981",
            "text": "#f0fdf4",
            "text_secondary": "#d1fae5",
            "border": "#2d4a3e",
        },
    },
    {
        "name": "Sunset Red",
        "description": "Passionate and dynamic",
        "colors": {
            "primary": "#dc2626",
            "background": "#1f0c0c",
            "surface": "#2d1414",
            "accent": "#ef4444",
            "text": "#fef2f2",
            "text_secondary": "#fecaca",
            "border": "#451a1a",
        },
    },
]
