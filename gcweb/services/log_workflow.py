"""Posting cache logs, trackable logs and log images through the live log API.

Every workflow starts by loading an authenticated website page that embeds an
anti-forgery token, then sends one or more requests carrying that token. The
steps run strictly one after another because each needs an identifier or the
token produced by the step before it.
"""

import logging
import re
from collections.abc import Callable

import requests
from pydantic import ValidationError as PydanticValidationError

from gcweb.api.client import GCWebClient, truncate
from gcweb.api.transport import RequestBody
from gcweb.core.constants import CSRF_TOKEN_HEADER, Endpoints
from gcweb.exceptions import CsrfTokenMissingError, GCWebError, RemoteRejectedError
from gcweb.models.enums import LogTypeTrackable, LogWorkflowState, StatusCode
from gcweb.models.log import (
    CacheLogSubmission,
    GeocacheLogRequest,
    GeocacheReference,
    LegacyGeocacheLogRequest,
    LogImage,
    LogImageResponse,
    LogResponse,
    LogTrackableEntry,
    LogWorkflowResult,
    TrackableLogRequest,
    TrackableLogSubmission,
)

logger = logging.getLogger(__name__)

PATTERN_CSRF_TOKEN = re.compile(r'"csrfToken":"([^"]+)"')
PATTERN_TB_CURRENT_GEOCACHE_JSON = re.compile(r'"currentGeocache":\{([^{}]*)\}')

IMAGE_CONTENT_TYPE = "image/jpeg"


def extract_csrf_token(html: str) -> str | None:
    match = PATTERN_CSRF_TOKEN.search(html)
    return match.group(1) if match else None


def extract_geocache_reference_code(html: str) -> str | None:
    """Reference code of the cache a trackable currently sits in, if the page names one."""
    match = PATTERN_TB_CURRENT_GEOCACHE_JSON.search(html)
    if not match:
        return None
    try:
        reference = GeocacheReference.model_validate_json("{" + match.group(1) + "}")
    except PydanticValidationError:
        logger.debug("Could not parse current geocache snippet on trackable page")
        return None
    return reference.reference_code


def log_error(image: bool, message: str, state: LogWorkflowState | None = None) -> LogWorkflowResult:
    """Typed failure for a log or log image workflow."""
    logger.warning(f"{'LOG IMAGE ERROR' if image else 'LOG ERROR'}: {message}")
    if image:
        return LogWorkflowResult(
            status=StatusCode.LOG_IMAGE_POST_ERROR,
            state=state or LogWorkflowState.LOG_IMAGE_POST_ERROR,
            message=message,
        )
    return LogWorkflowResult(
        status=StatusCode.LOG_POST_ERROR,
        state=state or LogWorkflowState.LOG_POST_ERROR,
        message=message,
    )


class LogWorkflowEngine:
    """Runs the token fetch, submit, image upload and image update steps."""

    def __init__(self, client: GCWebClient) -> None:
        self.client = client

    # --- token fetch ---

    def fetch_token(self, page_url: str) -> tuple[str, str]:
        """Load a log page and extract its CSRF token.

        Returns:
            Tuple of (page html, token)

        Raises:
            CsrfTokenMissingError: If the page failed to load or holds no token

        """
        try:
            ok, html = self.client.fetch_page(page_url)
        except requests.RequestException as e:
            logger.warning(f"Could not load log page {page_url}: {e}")
            raise CsrfTokenMissingError(page_url) from e

        token = extract_csrf_token(html) if ok else None
        if token is None:
            raise CsrfTokenMissingError(page_url)
        return html, token

    # --- cache logs ---

    def post_log(self, submission: CacheLogSubmission) -> LogWorkflowResult:
        """Post a cache log, then upload its images with the same token."""
        if not submission.text.strip():
            logger.warning(f"No log text given for {submission.geocode}")
            return LogWorkflowResult(status=StatusCode.NO_LOG_TEXT, state=LogWorkflowState.INPUT_REJECTED)

        logger.info(
            f"Trying to post log for cache {submission.geocode} - action: {submission.log_type.name}; "
            f"date: {submission.date}; trackables: {len(submission.trackables)}; images: {len(submission.images)}"
        )

        page_url = self.client.website(Endpoints.GEOCACHE_LOG_PAGE.format(geocode=submission.geocode))
        try:
            _, token = self.fetch_token(page_url)
        except CsrfTokenMissingError as e:
            logger.warning(f"Log Post: {e.message}, trying legacy log flow")
            return self._guarded(False, lambda: self.post_log_legacy(submission))

        return self._guarded(False, lambda: self._post_log_with_token(submission, token))

    def _post_log_with_token(self, submission: CacheLogSubmission, token: str) -> LogWorkflowResult:
        request = GeocacheLogRequest(
            images=[],
            log_date=submission.date,
            log_text=submission.text,
            log_type=int(submission.log_type),
            trackables=self._trackable_entries(submission),
            used_favorite_point=submission.add_to_favorites,
        )
        data = self.client.request_json(
            "POST",
            self.client.website(Endpoints.GEOCACHE_LOG.format(geocode=submission.geocode)),
            headers={CSRF_TOKEN_HEADER: token},
            body=RequestBody(json=request.to_json_body()),
        )
        response = LogResponse.model_validate(data or {})
        if not response.log_reference_code:
            raise RemoteRejectedError("logReferenceCode", f"Problem posting log, response is: {truncate(str(data))}")

        log_code = response.log_reference_code
        logger.info(f"Posted log {log_code} for {submission.geocode}")

        for image in submission.images:
            image_result = self._guarded(True, lambda image=image: self._upload_image(log_code, image, token))
            if not image_result.ok:
                # the log exists; report the image failure but keep its reference
                return image_result.model_copy(update={"reference": log_code})

        return LogWorkflowResult.success(log_code)

    def post_log_legacy(self, submission: CacheLogSubmission) -> LogWorkflowResult:
        """Post a cache log through the older API proxy endpoint, which needs no page token."""
        request = LegacyGeocacheLogRequest(
            geocache_reference_code=submission.geocode,
            log_date=submission.date,
            log_text=submission.text,
            log_type=int(submission.log_type),
            trackables=self._trackable_entries(submission),
            used_favorite_point=submission.add_to_favorites,
        )
        data = self.client.request_json(
            "POST",
            self.client.api_proxy(Endpoints.LEGACY_GEOCACHE_LOG.format(geocode=submission.geocode.lower())),
            body=RequestBody(json=request.to_json_body()),
        )
        response = LogResponse.model_validate(data or {})
        if not response.log_reference_code:
            raise RemoteRejectedError(
                "logReferenceCode", f"Problem posting log via legacy flow, response is: {truncate(str(data))}"
            )

        log_code = response.log_reference_code
        logger.info(f"Posted log {log_code} for {submission.geocode} via legacy flow")

        # each image loads its own token from the log's edit page
        for image in submission.images:
            image_result = self.post_log_image(submission.geocode, log_code, image)
            if not image_result.ok:
                return image_result.model_copy(update={"reference": log_code})

        return LogWorkflowResult.success(log_code)

    @staticmethod
    def _trackable_entries(submission: CacheLogSubmission) -> list[LogTrackableEntry]:
        return [
            LogTrackableEntry(trackable_code=t.trackable_code, trackable_log_type_id=int(t.action))
            for t in submission.trackables
        ]

    # --- log images ---

    def post_log_image(self, geocode: str, log_code: str, image: LogImage) -> LogWorkflowResult:
        """Attach an image to an existing log, loading the token from the log's edit page."""
        logger.info(f"Trying to post image for log {log_code} of cache {geocode}")
        try:
            _, token = self.fetch_token(self.client.website(Endpoints.LOG_EDIT_PAGE.format(log_code=log_code)))
        except CsrfTokenMissingError as e:
            return log_error(True, f"No CSRF token found: {e.message}")

        return self._guarded(True, lambda: self._upload_image(log_code, image, token))

    def _upload_image(self, log_code: str, image: LogImage, token: str) -> LogWorkflowResult:
        # name and description go in a separate request; sending them with the data times out
        data = self.client.request_json(
            "POST",
            self.client.website(Endpoints.LOG_IMAGES.format(log_code=log_code)),
            headers={CSRF_TOKEN_HEADER: token},
            body=RequestBody(files={"image": (image.filename, image.data, IMAGE_CONTENT_TYPE)}),
        )
        uploaded = LogImageResponse.model_validate(data or {})
        if not uploaded.guid or not uploaded.url:
            raise RemoteRejectedError("guid/url", f"Problem posting image, response is: {truncate(str(data))}")

        if image.has_metadata:
            form = {}
            if image.title.strip():
                form["name"] = image.title
            if image.description.strip():
                form["description"] = image.description
            put_data = self.client.request_json(
                "PUT",
                self.client.website(Endpoints.LOG_IMAGE_REPLACE.format(log_code=log_code, guid=uploaded.guid)),
                headers={CSRF_TOKEN_HEADER: token},
                body=RequestBody(form=form),
            )
            replaced = LogImageResponse.model_validate(put_data or {})
            if not replaced.url:
                raise RemoteRejectedError("url", f"Problem putting image metadata: {truncate(str(put_data))}")

        logger.info(f"Posted image {uploaded.guid} for log {log_code}")
        return LogWorkflowResult.success(uploaded.url)

    # --- trackable logs ---

    def post_trackable_log(self, submission: TrackableLogSubmission) -> LogWorkflowResult:
        """Post a trackable log. There is no legacy flow: a missing token aborts."""
        tb_code = submission.trackable_code
        logger.info(f"Trying to post trackable log for {tb_code} - action: {submission.action.name}")

        try:
            html, token = self.fetch_token(self.client.website(Endpoints.TRACKABLE_LOG_PAGE.format(tb_code=tb_code)))
        except CsrfTokenMissingError as e:
            logger.warning(f"Log Trackable Post: {e.message}")
            return log_error(False, f"No CSRF token found for trackable {tb_code}", LogWorkflowState.ABORTED)

        geocache_reference_code = None
        if submission.action is LogTypeTrackable.RETRIEVED_IT:
            geocache_reference_code = extract_geocache_reference_code(html)

        request = TrackableLogRequest(
            images=[],
            log_date=submission.date,
            log_text=submission.text,
            log_type=int(submission.action),
            tracking_code=submission.tracking_code,
            geocache_reference_code=geocache_reference_code,
        )

        def submit() -> LogWorkflowResult:
            data = self.client.request_json(
                "POST",
                self.client.website(Endpoints.TRACKABLE_LOG.format(tb_code=tb_code)),
                headers={CSRF_TOKEN_HEADER: token},
                body=RequestBody(json=request.to_json_body()),
            )
            response = LogResponse.model_validate(data or {})
            if not response.log_reference_code:
                raise RemoteRejectedError(
                    "logReferenceCode", f"Problem posting trackable log, response is: {truncate(str(data))}"
                )
            return LogWorkflowResult.success(response.log_reference_code)

        return self._guarded(False, submit)

    # --- helpers ---

    @staticmethod
    def _guarded(image: bool, step: Callable[[], LogWorkflowResult]) -> LogWorkflowResult:
        """Run workflow steps, turning transport and API failures into typed results."""
        try:
            return step()
        except RemoteRejectedError as e:
            return log_error(image, e.diagnostic)
        except (GCWebError, requests.RequestException, PydanticValidationError) as e:
            return log_error(image, truncate(str(e)))
