"""
Design system for AI Security Surveyor: dark theme with glass cards.
"""

# ── Colour palette: Dark Theme ─────────────────────────────────
BG_DARKEST = "#111827"
BG_DARK = "#1F2937"
BG_ELEVATED = "#1F2937"
BG_CARD = "rgba(31, 41, 55, 0.6)"

PRIMARY = "#2563EB"
PRIMARY_GLOW = "rgba(37, 99, 235, 0.25)"
ACCENT = "#60A5FA"
GRADIENT_PRIMARY = "linear-gradient(135deg, #2563EB 0%, #0EA5E9 100%)"
GRADIENT_TITLE = "linear-gradient(90deg, #60A5FA 0%, #67E8F9 100%)"

TEXT_PRIMARY = "#F9FAFB"
TEXT_SECONDARY = "#D1D5DB"
TEXT_MUTED = "#9CA3AF"

BORDER = "rgba(75, 85, 99, 0.6)"
BORDER_GLOW = "rgba(59, 130, 246, 0.6)"

SUCCESS = "#34D399"
WARNING = "#FBBF24"
WARNING_BG = "rgba(251, 191, 36, 0.1)"
DANGER = "#F87171"
DANGER_BG = "rgba(239, 68, 68, 0.1)"

RADIUS = "16px"
RADIUS_SM = "10px"
SHADOW_SM = "0 2px 4px rgba(0, 0, 0, 0.2)"
SHADOW_GLOW = f"0 0 15px {PRIMARY_GLOW}, 0 4px 12px rgba(0, 0, 0, 0.3)"

# ── Font stack ──────────────────────────────────────────────────────
FONT_FAMILY = "'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif"
FONT_MONO = "'JetBrains Mono', 'Fira Code', monospace"
GOOGLE_FONT_URL = "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&family=JetBrains+Mono:wght@400;500&display=swap"

# ── Reusable style dictionaries ─────────────────────────────────────

base_page_style = {
    "font_family": FONT_FAMILY,
    "background": BG_DARKEST,
    "color": TEXT_PRIMARY,
    "min_height": "100vh",
    "display": "flex",
    "flex_direction": "column",
    "align_items": "center",
    "padding": ["16px", "32px"],
}

card_style = {
    "background": BG_CARD,
    "backdrop_filter": "blur(12px)",
    "border": f"1px solid {BORDER}",
    "border_radius": RADIUS,
    "padding": "24px",
    "box_shadow": SHADOW_SM,
}

placement_card_style = {
    "background": "rgba(31, 41, 55, 0.5)",
    "border_radius": RADIUS_SM,
    "padding": "20px",
    "transition": "all 0.3s ease",
    "list_style_type": "none",
}

primary_button_style = {
    "background": GRADIENT_PRIMARY,
    "color": "white",
    "border": "none",
    "border_radius": "9999px",
    "font_weight": "700",
    "min_height": "44px",
    "padding_x": "28px",
    "cursor": "pointer",
    "transition": "all 0.3s cubic-bezier(0.4, 0, 0.2, 1)",
    "box_shadow": f"0 4px 14px {PRIMARY_GLOW}",
    "_hover": {
        "transform": "translateY(-2px)",
        "box_shadow": SHADOW_GLOW,
        "filter": "brightness(1.1)",
    },
}

secondary_button_style = {
    "background": "#374151",
    "color": "white",
    "border": "none",
    "border_radius": "9999px",
    "font_weight": "700",
    "min_height": "40px",
    "cursor": "pointer",
    "transition": "all 0.3s ease",
    "_hover": {"background": "#4B5563"},
}

zoom_button_style = {
    "background": "rgba(17, 24, 39, 0.8)",
    "color": "white",
    "border": f"1px solid {BORDER}",
    "border_radius": "8px",
    "width": "36px",
    "height": "36px",
    "cursor": "pointer",
    "_hover": {"background": "rgba(55, 65, 81, 0.9)"},
}

input_style = {
    "border_radius": "9999px",
    "border": f"1px solid {BORDER}",
    "background": BG_ELEVATED,
    "color": TEXT_PRIMARY,
    "font_size": "16px",
    "width": "100%",
    "_focus": {
        "border": f"1px solid {PRIMARY}",
        "box_shadow": f"0 0 0 3px {PRIMARY_GLOW}",
    },
}

