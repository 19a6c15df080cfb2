"""Setup screen shown instead of the app when an API key is missing."""
import reflex as rx
from security_surveyor.state import AppState
from security_surveyor.styles import (
    card_style, TEXT_PRIMARY, TEXT_SECONDARY, TEXT_MUTED, DANGER, ACCENT, RADIUS_SM, FONT_MONO,
)


def _key_row(label: str, var_name: str, hint: str, link_text: str, href: str) -> rx.Component:
    return rx.box(
        rx.text(label, font_size="0.85rem", font_weight="500", color=TEXT_SECONDARY),
        rx.code(var_name, font_family=FONT_MONO, color="#67E8F9", margin_top="4px", display="block"),
        rx.cond(
            AppState.missing_keys.contains(var_name),
            rx.text("Not set", font_size="0.75rem", color=DANGER, margin_top="2px"),
        ),
        rx.text(hint, font_size="0.75rem", color=TEXT_MUTED, margin_top="4px"),
        rx.link(link_text, href=href, is_external=True, font_size="0.75rem", color=ACCENT),
    )


def api_configuration_message() -> rx.Component:
    return rx.center(
        rx.box(
            rx.hstack(
                rx.icon("triangle-alert", size=32, color=DANGER),
                rx.heading("Application Not Configured", size="6", color=TEXT_PRIMARY),
                spacing="4",
                align_items="center",
                margin_bottom="16px",
            ),
            rx.text(
                "This application requires API keys for Google Gemini and Google Maps to function. "
                "These keys must be configured as environment variables in your deployment environment.",
                color=TEXT_SECONDARY,
                line_height="1.7",
                margin_bottom="24px",
            ),
            rx.vstack(
                _key_row(
                    "Google Gemini API Key", "GEMINI_API_KEY", "Used for the security analysis.",
                    "Get your key from Google AI Studio", "https://aistudio.google.com/app/apikey",
                ),
                _key_row(
                    "Google Maps API Key", "MAPS_API_KEY",
                    "Ensure 'Geocoding API' and 'Maps Static API' are enabled.",
                    "Get your key from Google Cloud Console",
                    "https://console.cloud.google.com/google/maps-apis/overview",
                ),
                spacing="4",
                padding="16px",
                border_radius=RADIUS_SM,
                background="rgba(17, 24, 39, 0.7)",
            ),
            rx.text(
                "Once you have configured these variables (or a .env file at the project root), restart the application.",
                color=TEXT_MUTED,
                font_size="0.85rem",
                margin_top="24px",
            ),
            width="100%",
            max_width="42rem",
            **card_style,
        ),
        min_height="100vh",
        width="100%",
    )
