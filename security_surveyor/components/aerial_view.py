"""Satellite image with camera placement markers and zoom controls."""
import reflex as rx
from security_surveyor.state import AppState
from security_surveyor.styles import (
    BORDER, RADIUS, TEXT_MUTED, zoom_button_style,
)


def _marker(placement: dict) -> rx.Component:
    is_hovered = AppState.hovered_placement == placement["index"].to(int)
    color = placement["color"].to(str)
    return rx.box(
        # Coverage area
        rx.box(
            position="absolute",
            width="128px",
            height="128px",
            left="50%",
            top="50%",
            border_radius="50%",
            background="radial-gradient(circle, " + color + " 0%, transparent 70%)",
            transform=rx.cond(is_hovered, "translate(-50%, -50%) scale(1)", "translate(-50%, -50%) scale(0)"),
            opacity=rx.cond(is_hovered, "0.3", "0"),
            transition="all 0.3s ease",
        ),
        # Marker dot
        rx.box(
            width="16px",
            height="16px",
            border_radius="50%",
            border="2px solid white",
            background=color,
            box_shadow="0 2px 6px rgba(0, 0, 0, 0.5)",
            transform=rx.cond(is_hovered, "scale(1.5)", "scale(1)"),
            transition="transform 0.3s ease",
        ),
        position="absolute",
        left=placement["left"].to(str),
        top=placement["top"].to(str),
        transform="translate(-50%, -50%)",
        pointer_events="none",
        aria_hidden="true",
    )


def zoom_controls() -> rx.Component:
    return rx.vstack(
        rx.button(
            rx.icon("plus", size=16),
            on_click=AppState.change_zoom(1),
            disabled=~AppState.can_zoom_in,
            aria_label="Zoom in",
            **zoom_button_style,
        ),
        rx.button(
            rx.icon("minus", size=16),
            on_click=AppState.change_zoom(-1),
            disabled=~AppState.can_zoom_out,
            aria_label="Zoom out",
            **zoom_button_style,
        ),
        position="absolute",
        top="12px",
        right="12px",
        spacing="2",
    )


def aerial_view() -> rx.Component:
    """Render the aerial image, or a pulsing placeholder while it loads."""
    return rx.cond(
        AppState.aerial_image != "",
        rx.box(
            rx.image(
                src=AppState.aerial_image,
                alt="Satellite view of property",
                width="100%",
                height="100%",
                object_fit="cover",
            ),
            rx.foreach(AppState.placements, _marker),
            rx.cond(AppState.is_complete, zoom_controls()),
            rx.cond(
                AppState.is_image_loading,
                rx.center(
                    rx.spinner(size="3"),
                    position="absolute",
                    inset="0",
                    background="rgba(17, 24, 39, 0.5)",
                ),
            ),
            id="aerial-view",
            position="relative",
            width="100%",
            overflow="hidden",
            border_radius=RADIUS,
            border=f"4px solid {BORDER}",
            box_shadow="0 25px 50px -12px rgba(0, 0, 0, 0.5)",
        ),
        rx.center(
            rx.text("Retrieving aerial view...", color=TEXT_MUTED),
            width="100%",
            aspect_ratio="16 / 9",
            background="#1E1B4B",
            border_radius=RADIUS,
            class_name="animate-pulse",
        ),
    )
