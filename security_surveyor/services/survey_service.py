"""
Wiring between the Reflex state and the survey controller.

Builds one SurveyController per browser session (keyed by the Reflex client
token) with the real imagery, vision and report agents.
"""
import os
import logging
from collections import OrderedDict

import reflex as rx

from backend.agents.imagery_agent import get_aerial_view_from_address
from backend.agents.vision_agent import get_security_analysis
from backend.services.report_pdf_service import ReportPDFService
from backend.services.survey_controller import SurveyController

logger = logging.getLogger(__name__)

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _get_upload_dir() -> str:
    """Get the Reflex upload directory (writable at runtime, served by backend)."""
    try:
        upload_dir = str(rx.get_upload_dir())
    except Exception:
        upload_dir = os.path.join(project_root, "uploaded_files")
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


# ── Controller registry ────────────────────────────────────────────
# Least recently used sessions are evicted past MAX_SESSIONS
MAX_SESSIONS = 200
_controllers: "OrderedDict[str, SurveyController]" = OrderedDict()


def build_controller() -> SurveyController:
    pdf_service = ReportPDFService(output_dir=_get_upload_dir())
    return SurveyController(
        fetch_image=get_aerial_view_from_address,
        analyze=get_security_analysis,
        exporter=pdf_service.export_report,
    )


def get_controller(client_token: str) -> SurveyController:
    controller = _controllers.get(client_token)
    if controller is not None:
        _controllers.move_to_end(client_token)
        return controller

    controller = build_controller()
    _controllers[client_token] = controller
    while len(_controllers) > MAX_SESSIONS:
        evicted, _ = _controllers.popitem(last=False)
        logger.info(f"Survey session evicted ({evicted[:8]}...)")
    logger.info(f"Survey session created ({len(_controllers)} active)")
    return controller
