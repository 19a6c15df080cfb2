"""
Main application entry point: layout and app creation.
"""
import reflex as rx
from security_surveyor.state import AppState
from security_surveyor.styles import base_page_style, FONT_FAMILY, GOOGLE_FONT_URL
from security_surveyor.components.api_configuration_message import api_configuration_message
from security_surveyor.pages.survey import survey_page


def index() -> rx.Component:
    """Home page: the survey, or the setup screen when API keys are missing."""
    return rx.box(
        rx.cond(
            AppState.is_configured,
            survey_page(),
            api_configuration_message(),
        ),
        **base_page_style,
    )


# ── Create app ─────────────────────────────────────────────────────
app = rx.App(
    theme=rx.theme(
        appearance="dark",
        has_background=True,
        radius="medium",
        accent_color="blue",
    ),
    style={
        "font_family": FONT_FAMILY,
    },
    head_components=[
        rx.el.link(rel="stylesheet", href=GOOGLE_FONT_URL),
        rx.el.meta(name="description", content="AI Security Surveyor: satellite-based security camera placement planning"),
        rx.el.meta(name="viewport", content="width=device-width, initial-scale=1"),
    ],
)

app.add_page(index, route="/", title="AI Security Surveyor")
