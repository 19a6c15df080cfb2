"""Address input form."""
import reflex as rx
from security_surveyor.state import AppState
from security_surveyor.styles import input_style, primary_button_style


def location_input() -> rx.Component:
    return rx.form(
        rx.hstack(
            rx.input(
                placeholder="e.g., 1600 Amphitheatre Parkway, Mountain View, CA",
                value=AppState.address,
                on_change=AppState.set_address,
                disabled=AppState.is_loading,
                name="address",
                size="3",
                **input_style,
                flex="1",
            ),
            rx.button(
                rx.cond(
                    AppState.is_loading,
                    rx.hstack(rx.spinner(size="2"), rx.text("Analyzing..."), spacing="2", align_items="center"),
                    rx.hstack(rx.icon("search", size=16), rx.text("Analyze"), spacing="2", align_items="center"),
                ),
                type="submit",
                disabled=AppState.is_loading | (AppState.address.strip() == ""),
                **primary_button_style,
            ),
            width="100%",
            spacing="3",
            flex_direction=["column", "row"],
            align_items=["stretch", "center"],
        ),
        on_submit=AppState.handle_submit,
        reset_on_submit=False,
        width="100%",
        max_width="42rem",
    )
