"""Textual security report: overview, placement cards, equipment summary."""
import reflex as rx
from security_surveyor.state import AppState
from security_surveyor.styles import (
    card_style, placement_card_style,
    TEXT_PRIMARY, TEXT_SECONDARY, TEXT_MUTED, ACCENT, SUCCESS, BORDER, BORDER_GLOW,
    RADIUS_SM, FONT_MONO,
)


def _placement_card(placement: dict) -> rx.Component:
    index = placement["index"].to(int)
    is_hovered = AppState.hovered_placement == index
    return rx.el.li(
        rx.hstack(
            rx.box(
                width="14px",
                height="14px",
                min_width="14px",
                border_radius="50%",
                border="2px solid white",
                background=placement["color"].to(str),
            ),
            rx.box(
                rx.text(placement["location"].to(str), font_weight="700", font_size="1.1rem", color=TEXT_PRIMARY),
                rx.text(placement["camera_type"].to(str), font_size="0.85rem", font_weight="500", color=ACCENT),
            ),
            spacing="3",
            align_items="center",
            margin_bottom="10px",
        ),
        rx.text(placement["reason"].to(str), color=TEXT_SECONDARY),
        on_mouse_enter=AppState.hover_placement(index),
        on_mouse_leave=AppState.clear_hover,
        border=rx.cond(is_hovered, f"1px solid {BORDER_GLOW}", f"1px solid {BORDER}"),
        **placement_card_style,
    )


def _summary_row(item: dict) -> rx.Component:
    return rx.hstack(
        rx.text(item["camera_type"].to(str), color=TEXT_SECONDARY),
        rx.text("x " + item["quantity"].to(str), font_weight="700", font_family=FONT_MONO, color=TEXT_PRIMARY),
        justify="between",
        width="100%",
        padding_y="8px",
        border_bottom=f"1px solid {BORDER}",
    )


def _report_skeleton() -> rx.Component:
    return rx.box(
        rx.skeleton(width="75%", height="32px", margin="0 auto 24px"),
        rx.skeleton(width="100%", height="16px", margin_bottom="16px"),
        rx.skeleton(width="85%", height="16px", margin="0 auto"),
        rx.text(
            "Analyzing vulnerabilities and preparing recommendations...",
            color=TEXT_MUTED,
            margin_top="16px",
            text_align="center",
        ),
        width="100%",
        max_width="56rem",
        **card_style,
    )


def security_report() -> rx.Component:
    return rx.cond(
        AppState.has_analysis,
        rx.box(
            rx.hstack(
                rx.icon("shield-check", size=36, color=SUCCESS),
                rx.heading("Security Analysis", size="7", color=TEXT_PRIMARY),
                spacing="3",
                align_items="center",
                margin_bottom="24px",
            ),
            rx.box(
                rx.heading("Overview", size="4", color=TEXT_SECONDARY, margin_bottom="8px"),
                rx.text(AppState.overview, color=TEXT_SECONDARY, line_height="1.7"),
                margin_bottom="32px",
            ),
            rx.box(
                rx.heading("Recommended Placements", size="4", color=TEXT_SECONDARY, margin_bottom="16px"),
                rx.el.ul(
                    rx.foreach(AppState.placements, _placement_card),
                    display="flex",
                    flex_direction="column",
                    gap="16px",
                    padding="0",
                ),
            ),
            rx.cond(
                AppState.camera_summary.length() > 0,
                rx.box(
                    rx.heading("Required Equipment Summary", size="4", color=TEXT_SECONDARY, margin_bottom="12px"),
                    rx.foreach(AppState.camera_summary, _summary_row),
                    margin_top="32px",
                    padding="16px",
                    border_radius=RADIUS_SM,
                    background="rgba(17, 24, 39, 0.5)",
                ),
            ),
            width="100%",
            max_width="56rem",
            **card_style,
        ),
        _report_skeleton(),
    )
