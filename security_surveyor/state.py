"""
Central application state.
Every attribute here is reactive: when changed, the UI auto-updates.

The workflow itself lives in SurveyController; this state mirrors the
controller's session record after every transition.
"""
import reflex as rx
import os
import sys
import logging

# Configure logging so agent logs show in the reflex run console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

# Ensure project root is on path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Load env vars (API keys etc.)
from dotenv import load_dotenv
load_dotenv(os.path.join(project_root, ".env"), override=False)

from backend.services.survey_controller import AnalysisStep, SurveySession
from backend.utils.config import DEFAULT_ZOOM, MIN_ZOOM, MAX_ZOOM, missing_configuration
from backend.utils.markers import color_for_index
from security_surveyor.services.survey_service import get_controller

logger = logging.getLogger(__name__)

LOADING_MESSAGES = {
    AnalysisStep.FETCHING_IMAGE.value: "Retrieving satellite imagery from Google Maps...",
    AnalysisStep.ANALYZING.value: "Analyzing property image and recommending camera placements...",
}


class AppState(rx.State):
    """Global application state."""

    # ── Input state ─────────────────────────────────────────────────
    address: str = ""

    # ── Workflow state ──────────────────────────────────────────────
    step: str = AnalysisStep.INPUT.value
    error_message: str = ""
    error_kind: str = ""
    zoom: int = DEFAULT_ZOOM
    is_image_loading: bool = False
    is_exporting: bool = False

    # ── Result data ─────────────────────────────────────────────────
    # aerial_image is a data URL; report_path is a BASENAME in the upload dir
    aerial_image: str = ""
    analysis: dict = {}
    hovered_placement: int = -1
    report_path: str = ""

    # ── Computed properties ─────────────────────────────────────────
    @rx.var
    def missing_keys(self) -> list[str]:
        return missing_configuration()

    @rx.var
    def is_configured(self) -> bool:
        return not missing_configuration()

    @rx.var
    def is_loading(self) -> bool:
        return self.step in (AnalysisStep.FETCHING_IMAGE.value, AnalysisStep.ANALYZING.value)

    @rx.var
    def is_complete(self) -> bool:
        return self.step == AnalysisStep.COMPLETE.value

    @rx.var
    def show_input(self) -> bool:
        return self.step in (AnalysisStep.INPUT.value, AnalysisStep.ERROR.value)

    @rx.var
    def loading_message(self) -> str:
        return LOADING_MESSAGES.get(self.step, "")

    @rx.var
    def has_analysis(self) -> bool:
        return bool(self.analysis)

    @rx.var
    def overview(self) -> str:
        return self.analysis.get("overview", "") if self.analysis else ""

    @rx.var
    def placements(self) -> list[dict]:
        """Placements flattened for rx.foreach, with marker color and CSS position."""
        items = []
        for i, p in enumerate(self.analysis.get("placements", []) if self.analysis else []):
            coords = p.get("coordinates") or {}
            items.append({
                "index": i,
                "location": p.get("location", ""),
                "reason": p.get("reason", ""),
                "camera_type": p.get("cameraType", ""),
                "color": color_for_index(i),
                "left": f"{coords.get('x', 0)}%",
                "top": f"{coords.get('y', 0)}%",
            })
        return items

    @rx.var
    def camera_summary(self) -> list[dict]:
        raw = (self.analysis.get("cameraSummary") or []) if self.analysis else []
        return [{"camera_type": str(item.get("cameraType", "")), "quantity": str(item.get("quantity", ""))} for item in raw]

    @rx.var
    def can_zoom_in(self) -> bool:
        return self.zoom < MAX_ZOOM and not self.is_image_loading

    @rx.var
    def can_zoom_out(self) -> bool:
        return self.zoom > MIN_ZOOM and not self.is_image_loading

    # ── Session mirroring ───────────────────────────────────────────

    def _controller(self):
        return get_controller(self.router.session.client_token)

    def _mirror(self, session: SurveySession):
        self.address = session.address
        self.step = session.step.value
        self.aerial_image = session.image or ""
        self.analysis = session.analysis.to_wire() if session.analysis else {}
        self.error_message = session.error
        self.error_kind = session.error_kind.value if session.error_kind else ""
        self.zoom = session.zoom
        self.hovered_placement = -1 if session.hovered_placement is None else session.hovered_placement
        self.is_image_loading = session.is_image_loading
        self.is_exporting = session.is_exporting
        self.report_path = os.path.basename(session.report_path) if session.report_path else ""

    # ── Event handlers ──────────────────────────────────────────────

    def set_address(self, value: str):
        if self.is_loading:
            return
        self.address = value
        self._controller().set_address(value)

    def handle_submit(self, form_data: dict):
        """Validate instantly, then kick off the survey as a background task."""
        if self.is_loading or not self.address.strip():
            return
        return AppState.run_survey

    @rx.event(background=True)
    async def run_survey(self):
        """Fetch imagery then analysis as a background task."""
        async with self:
            controller = self._controller()
            address = self.address
            origin = self.router.headers.origin or ""

        async def publish(session: SurveySession):
            async with self:
                self._mirror(session)

        await controller.submit(address, origin=origin, publish=publish)

    @rx.event(background=True)
    async def change_zoom(self, delta: int):
        """Refetch the aerial image one zoom level in or out."""
        async with self:
            controller = self._controller()

        async def publish(session: SurveySession):
            async with self:
                self._mirror(session)

        await controller.change_zoom(int(delta), publish=publish)

    @rx.event(background=True)
    async def export_report(self):
        """Generate the PDF report for the completed survey."""
        async with self:
            controller = self._controller()

        async def publish(session: SurveySession):
            async with self:
                self._mirror(session)

        path = await controller.export_report(publish=publish)
        if path:
            filename = os.path.basename(path)
            yield rx.download(url=rx.get_upload_url(filename), filename=filename)

    def hover_placement(self, index: int):
        self._controller().hover_placement(index)
        self.hovered_placement = index

    def clear_hover(self):
        self._controller().hover_placement(None)
        self.hovered_placement = -1

    def reset_survey(self):
        """'Start New Analysis': discard everything and return to the input form."""
        controller = self._controller()
        controller.reset()
        self._mirror(controller.session)

    def try_again(self):
        controller = self._controller()
        controller.retry()
        self._mirror(controller.session)
