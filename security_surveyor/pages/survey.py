"""
Main survey page.
Handles the address input, the aerial view with markers, the report and
the export / reset actions.
"""
import reflex as rx
from security_surveyor.state import AppState
from security_surveyor.styles import (
    primary_button_style, secondary_button_style,
    TEXT_SECONDARY, TEXT_MUTED, ACCENT, BORDER, RADIUS_SM, FONT_MONO,
    GRADIENT_TITLE, BG_DARK,
)
from security_surveyor.components.aerial_view import aerial_view
from security_surveyor.components.security_report import security_report
from security_surveyor.components.location_input import location_input
from security_surveyor.components.error_message import error_message


def header() -> rx.Component:
    return rx.vstack(
        rx.hstack(
            rx.icon("map-pin", size=40, color=ACCENT),
            rx.heading(
                "AI Security Surveyor",
                size="9",
                font_weight="800",
                background=GRADIENT_TITLE,
                background_clip="text",
                color="transparent",
            ),
            spacing="4",
            align_items="center",
        ),
        rx.text(
            "Enter a property address to retrieve real satellite imagery and receive a complete "
            "security camera placement plan.",
            color=TEXT_MUTED,
            font_size="1.1rem",
            max_width="42rem",
            text_align="center",
        ),
        align_items="center",
        margin_bottom="32px",
    )


# ── Input / error section ──────────────────────────────────────────
def input_section() -> rx.Component:
    return rx.vstack(
        location_input(),
        rx.cond(
            AppState.step == "error",
            rx.vstack(
                error_message(AppState.error_message),
                rx.button("Try Again", on_click=AppState.try_again, **secondary_button_style, padding_x="20px"),
                align_items="center",
                width="100%",
            ),
        ),
        align_items="center",
        width="100%",
    )


def _export_actions() -> rx.Component:
    return rx.vstack(
        rx.hstack(
            rx.button(
                rx.cond(
                    AppState.is_exporting,
                    rx.hstack(rx.spinner(size="2"), rx.text("Generating PDF..."), spacing="2", align_items="center"),
                    rx.hstack(rx.icon("file-down", size=18), rx.text("Export PDF Report"), spacing="2", align_items="center"),
                ),
                on_click=AppState.export_report,
                disabled=AppState.is_exporting,
                **primary_button_style,
            ),
            rx.cond(
                AppState.report_path != "",
                rx.link(
                    rx.button(
                        rx.icon("download", size=18),
                        "Download Report",
                        **secondary_button_style,
                        padding_x="20px",
                    ),
                    href=rx.get_upload_url(AppState.report_path),
                    is_external=True,
                ),
            ),
            rx.button(
                "Start New Analysis",
                on_click=AppState.reset_survey,
                **secondary_button_style,
                padding_x="20px",
            ),
            spacing="3",
            flex_wrap="wrap",
            justify="center",
        ),
        # Export errors surface alongside the results
        rx.cond(AppState.error_message != "", error_message(AppState.error_message)),
        align_items="center",
        width="100%",
        margin_top="16px",
    )


# ── Results section ────────────────────────────────────────────────
def results_section() -> rx.Component:
    return rx.vstack(
        rx.box(
            rx.text(
                rx.text.span("Address: ", font_weight="700", color=ACCENT),
                AppState.address,
                font_family=FONT_MONO,
                font_size="0.85rem",
                color=TEXT_SECONDARY,
                word_break="break-word",
            ),
            width="100%",
            padding="16px",
            background=BG_DARK,
            border=f"1px solid {BORDER}",
            border_radius=RADIUS_SM,
        ),
        aerial_view(),
        rx.cond(
            AppState.is_loading,
            rx.text(AppState.loading_message, color=TEXT_MUTED, text_align="center", padding="16px"),
        ),
        security_report(),
        rx.cond(AppState.is_complete, _export_actions()),
        align_items="center",
        spacing="6",
        width="100%",
        max_width="64rem",
    )


def survey_page() -> rx.Component:
    return rx.vstack(
        header(),
        rx.cond(AppState.show_input, input_section(), results_section()),
        rx.spacer(),
        rx.text(
            "Powered by Google Gemini & Google Maps. For informational purposes only.",
            color="#4B5563",
            font_size="0.85rem",
            padding_top="32px",
        ),
        align_items="center",
        width="100%",
        flex="1",
    )
