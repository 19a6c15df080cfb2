"""
Survey workflow controller.

Owns one SurveySession and drives it through
INPUT -> FETCHING_IMAGE -> ANALYZING -> COMPLETE (or ERROR), plus the zoom,
export, hover and reset actions available once a survey is complete.

The Reflex AppState wraps one controller per browser session and mirrors the
session record into reactive vars through the `publish` callback.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from backend.models.security_analysis import SecurityAnalysis
from backend.utils.config import DEFAULT_ZOOM, MIN_ZOOM, MAX_ZOOM
from backend.utils.errors import ErrorKind, SurveyError, UNKNOWN_ERROR_MESSAGE

logger = logging.getLogger(__name__)

EXPORT_FAILED_MESSAGE = "Failed to generate PDF report. Please try again."

FetchImage = Callable[[str, int], Awaitable[str]]
Analyze = Callable[[str, str], Awaitable[SecurityAnalysis]]
Exporter = Callable[[str, SecurityAnalysis, str], str]
Publish = Callable[["SurveySession"], Awaitable[None]]


class AnalysisStep(str, Enum):
    INPUT = "input"
    FETCHING_IMAGE = "fetching_image"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class SurveySession:
    address: str = ""
    step: AnalysisStep = AnalysisStep.INPUT
    image: Optional[str] = None
    analysis: Optional[SecurityAnalysis] = None
    error: str = ""
    error_kind: Optional[ErrorKind] = None
    zoom: int = DEFAULT_ZOOM
    hovered_placement: Optional[int] = None
    is_image_loading: bool = False
    is_exporting: bool = False
    report_path: str = ""
    # Bumped on every submit/reset; results from an older epoch are dropped.
    epoch: int = 0

    @property
    def is_loading(self) -> bool:
        return self.step in (AnalysisStep.FETCHING_IMAGE, AnalysisStep.ANALYZING)


def request_denied_message(message: str, origin: str = "") -> str:
    """Extend the Maps 'request denied' error with referrer remediation steps."""
    site = origin.rstrip("/") if origin else "this application's URL"
    return (
        f"{message}\n\n"
        f"If your Maps API key has HTTP referrer restrictions, add {site}/* to the key's allowed "
        f"referrers in the Google Cloud Console (APIs & Services > Credentials), then try again."
    )


def display_message(error: SurveyError, origin: str = "") -> str:
    if error.kind == ErrorKind.REQUEST_DENIED:
        return request_denied_message(error.message, origin)
    return error.message


class SurveyController:
    def __init__(self, fetch_image: FetchImage, analyze: Analyze,
                 exporter: Optional[Exporter] = None,
                 session: Optional[SurveySession] = None):
        self.fetch_image = fetch_image
        self.analyze = analyze
        self.exporter = exporter
        self.session = session or SurveySession()

    def _is_stale(self, epoch: int) -> bool:
        return epoch != self.session.epoch

    async def _publish(self, publish: Optional[Publish]):
        if publish is not None:
            await publish(self.session)

    def _fail(self, error: SurveyError, origin: str = ""):
        self.session.error = display_message(error, origin)
        self.session.error_kind = error.kind

    # ── Input ───────────────────────────────────────────────────────

    def set_address(self, value: str):
        if not self.session.is_loading:
            self.session.address = value

    def hover_placement(self, index: Optional[int]):
        self.session.hovered_placement = index

    # ── Main workflow ───────────────────────────────────────────────

    async def submit(self, address: Optional[str] = None, origin: str = "",
                     publish: Optional[Publish] = None) -> bool:
        """
        Fetch the aerial image, then the analysis, strictly in sequence.

        Returns True when the survey reached COMPLETE. A blank address or a
        submit while a survey is already loading is a no-op.
        """
        s = self.session
        if s.is_loading:
            logger.info("Submit ignored: a survey is already in progress")
            return False
        if address is not None:
            s.address = address
        query = s.address.strip()
        if not query:
            return False

        s.epoch += 1
        epoch = s.epoch
        s.image = None
        s.analysis = None
        s.error = ""
        s.error_kind = None
        s.report_path = ""
        s.hovered_placement = None
        s.zoom = DEFAULT_ZOOM
        # A zoom or export from the previous epoch can no longer clear its own flag
        s.is_image_loading = False
        s.is_exporting = False
        s.step = AnalysisStep.FETCHING_IMAGE
        await self._publish(publish)

        try:
            image = await self.fetch_image(query, s.zoom)
            if self._is_stale(epoch):
                logger.info("Discarding aerial image from a superseded survey")
                return False
            self.session.image = image
            self.session.step = AnalysisStep.ANALYZING
            await self._publish(publish)

            analysis = await self.analyze(query, image)
            if self._is_stale(epoch):
                logger.info("Discarding analysis from a superseded survey")
                return False
            self.session.analysis = analysis
            self.session.step = AnalysisStep.COMPLETE
            logger.info(f"Survey complete for '{query}': {len(analysis.placements)} placements")
        except SurveyError as e:
            if self._is_stale(epoch):
                return False
            logger.warning(f"Survey failed ({e.kind.value}): {e.message}")
            self._fail(e, origin)
            self.session.step = AnalysisStep.ERROR
        except Exception as e:
            if self._is_stale(epoch):
                return False
            logger.exception(f"Unexpected survey error: {e}")
            self._fail(SurveyError(ErrorKind.UNKNOWN, UNKNOWN_ERROR_MESSAGE))
            self.session.step = AnalysisStep.ERROR

        await self._publish(publish)
        return self.session.step == AnalysisStep.COMPLETE

    # ── Zoom ────────────────────────────────────────────────────────

    async def change_zoom(self, delta: int, publish: Optional[Publish] = None) -> bool:
        """
        Refetch the aerial image at `zoom + delta`; the analysis is kept.

        Only valid in COMPLETE. Out-of-range zoom levels and calls made while
        another zoom fetch is in flight are ignored.
        """
        s = self.session
        if s.step != AnalysisStep.COMPLETE or s.is_image_loading:
            return False
        new_zoom = s.zoom + delta
        if new_zoom < MIN_ZOOM or new_zoom > MAX_ZOOM:
            logger.info(f"Zoom {new_zoom} outside [{MIN_ZOOM}, {MAX_ZOOM}], ignored")
            return False

        epoch = s.epoch
        s.is_image_loading = True
        s.error = ""
        s.error_kind = None
        await self._publish(publish)

        changed = False
        try:
            image = await self.fetch_image(s.address.strip(), new_zoom)
            if not self._is_stale(epoch):
                self.session.image = image
                self.session.zoom = new_zoom
                changed = True
        except SurveyError as e:
            if not self._is_stale(epoch):
                logger.warning(f"Zoom refetch failed ({e.kind.value}): {e.message}")
                self._fail(e)
        except Exception as e:
            if not self._is_stale(epoch):
                logger.exception(f"Unexpected zoom error: {e}")
                self._fail(SurveyError(ErrorKind.UNKNOWN, UNKNOWN_ERROR_MESSAGE))

        if self._is_stale(epoch):
            return False
        self.session.is_image_loading = False
        await self._publish(publish)
        return changed

    # ── Export ──────────────────────────────────────────────────────

    async def export_report(self, publish: Optional[Publish] = None) -> Optional[str]:
        """
        Write the PDF report for the completed survey and return its path.

        A second call while an export is running is a no-op. Failures set the
        error message but leave the workflow step untouched.
        """
        s = self.session
        if s.step != AnalysisStep.COMPLETE or s.analysis is None or not s.image:
            return None
        if s.is_exporting or self.exporter is None:
            return None

        epoch = s.epoch
        s.is_exporting = True
        s.error = ""
        s.error_kind = None
        await self._publish(publish)

        path = None
        try:
            path = await asyncio.to_thread(self.exporter, s.image, s.analysis, s.address.strip())
        except Exception as e:
            if not self._is_stale(epoch):
                logger.error(f"Report export failed: {e}")
                self._fail(SurveyError(ErrorKind.EXPORT_FAILED, EXPORT_FAILED_MESSAGE))

        if self._is_stale(epoch):
            return None
        if path:
            self.session.report_path = path
        self.session.is_exporting = False
        await self._publish(publish)
        return path

    # ── Reset ───────────────────────────────────────────────────────

    def reset(self):
        """Discard the whole session and return to INPUT."""
        self.session = SurveySession(epoch=self.session.epoch + 1)

    def retry(self):
        """'Try Again' from ERROR: back to INPUT with the address kept."""
        if self.session.step != AnalysisStep.ERROR:
            return
        address = self.session.address
        self.reset()
        self.session.address = address
