import reflex as rx
from security_surveyor.styles import DANGER, DANGER_BG, RADIUS_SM


def error_message(message: rx.Var) -> rx.Component:
    """Red banner for workflow and export errors."""
    return rx.box(
        rx.hstack(
            rx.icon("triangle-alert", size=20, color=DANGER, min_width="20px"),
            rx.text(message, color=DANGER, white_space="pre-wrap"),
            spacing="3",
            align_items="start",
        ),
        background=DANGER_BG,
        border="1px solid rgba(239, 68, 68, 0.3)",
        border_radius=RADIUS_SM,
        padding="16px",
        margin_top="16px",
        width="100%",
        max_width="42rem",
    )
