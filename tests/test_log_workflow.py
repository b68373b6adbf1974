"""Tests for the cache log, trackable log and log image workflows."""

from datetime import datetime, timedelta, timezone

import pytest
import requests

from gcweb.models.enums import LogType, LogTypeTrackable, LogWorkflowState, StatusCode
from gcweb.models.log import (
    CacheLogSubmission,
    LogImage,
    TrackableAction,
    TrackableLogSubmission,
    format_log_date,
)
from gcweb.services.log_workflow import extract_csrf_token, extract_geocache_reference_code
from tests.fakes import API_PROXY, WEBSITE, FakeResponse, log_page

LOG_DATE = datetime(2024, 5, 1, 14, 30, 0)


def submission(**overrides) -> CacheLogSubmission:
    values = {
        "geocode": "GC1ABC",
        "log_type": LogType.FOUND_IT,
        "date": LOG_DATE,
        "text": "TFTC!",
    }
    values.update(overrides)
    return CacheLogSubmission(**values)


def image(title: str = "", description: str = "") -> LogImage:
    return LogImage(data=b"\xff\xd8jpeg", filename="photo.jpg", title=title, description=description)


def created(log_code: str = "GLABC") -> FakeResponse:
    return FakeResponse(json_data={"guid": "x", "logReferenceCode": log_code})


def uploaded(guid: str = "img-1", url: str = "https://img.geocaching.com/img-1.jpg") -> FakeResponse:
    return FakeResponse(json_data={"guid": guid, "url": url, "thumbnailUrl": url, "success": True})


class TestExtraction:
    def test_csrf_token(self):
        assert extract_csrf_token('<script>{"user":1,"csrfToken":"abc-123"}</script>') == "abc-123"
        assert extract_csrf_token("<html>no token</html>") is None

    def test_current_geocache(self):
        html = '{"trackable":{"currentGeocache":{"id":123,"referenceCode":"GC123","name":"somename"}}}'

        assert extract_geocache_reference_code(html) == "GC123"
        assert extract_geocache_reference_code("<html></html>") is None
        assert extract_geocache_reference_code('"currentGeocache":{"id":"not a number"}') is None

    def test_log_date_format(self):
        assert format_log_date(LOG_DATE) == "2024-05-01T14:30:00.000"

        aware = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_log_date(aware) == aware.astimezone().replace(tzinfo=None).isoformat(timespec="milliseconds")


class TestPostLog:
    def test_blank_text_is_rejected_without_network(self, service, transport):
        result = service.post_log(submission(text="   \n"))

        assert result.status is StatusCode.NO_LOG_TEXT
        assert result.state is LogWorkflowState.INPUT_REJECTED
        assert transport.call_count == 0

    def test_posts_log_with_token(self, service, transport):
        transport.queue(log_page(), created())

        result = service.post_log(
            submission(
                add_to_favorites=True,
                trackables=[TrackableAction(trackable_code="TB1", action=LogTypeTrackable.DROPPED_OFF)],
            )
        )

        assert result.ok
        assert result.reference == "GLABC"
        assert result.state is LogWorkflowState.SUCCESS

        page_request, post_request = transport.requests
        assert page_request.uri == f"{WEBSITE}/live/geocache/GC1ABC/log"
        assert post_request.method == "POST"
        assert post_request.uri == f"{WEBSITE}/api/live/v1/logs/GC1ABC/geocacheLog"
        assert post_request.headers == {"CSRF-Token": "tok-123"}
        assert post_request.body.json == {
            "images": [],
            "logDate": "2024-05-01T14:30:00.000",
            "logText": "TFTC!",
            "logType": 2,
            "trackables": [{"trackableCode": "TB1", "trackableLogTypeId": 14}],
            "usedFavoritePoint": True,
        }

    def test_image_with_metadata_takes_four_calls(self, service, transport):
        transport.queue(log_page(), created(), uploaded(), uploaded())

        result = service.post_log(submission(images=[image(title="View", description="")]))

        assert result.ok
        assert result.reference == "GLABC"
        assert transport.call_count == 4

        upload, replace = transport.requests[2:]
        assert upload.uri == f"{WEBSITE}/api/live/v1/logs/GLABC/images"
        assert upload.body.files == {"image": ("photo.jpg", b"\xff\xd8jpeg", "image/jpeg")}
        assert upload.headers == {"CSRF-Token": "tok-123"}
        assert replace.method == "PUT"
        assert replace.uri == f"{WEBSITE}/api/live/v1/images/GLABC/img-1/replace"
        assert replace.body.form == {"name": "View"}

    def test_image_without_metadata_skips_update(self, service, transport):
        transport.queue(log_page(), created(), uploaded())

        assert service.post_log(submission(images=[image()])).ok
        assert transport.call_count == 3

    def test_missing_token_uses_exactly_one_legacy_call(self, service, transport):
        transport.queue(log_page(token=None), created("GLLEGACY"))

        result = service.post_log(submission())

        assert result.ok
        assert result.reference == "GLLEGACY"
        assert transport.call_count == 2

        legacy = transport.requests[1]
        assert legacy.uri == f"{API_PROXY}/web/v1/geocache/gc1abc/GeocacheLog"
        assert legacy.headers is None
        assert legacy.body.json["geocacheReferenceCode"] == "GC1ABC"
        assert legacy.body.json["logType"] == 2

    @pytest.mark.parametrize(
        "page_failure",
        [log_page(status_code=500), requests.exceptions.ConnectionError("offline")],
        ids=["server-error", "connection-error"],
    )
    def test_page_failure_falls_back_to_legacy(self, service, transport, page_failure):
        transport.queue(page_failure, created("GLLEGACY"))

        result = service.post_log(submission())

        assert result.reference == "GLLEGACY"
        assert transport.call_count == 2

    def test_legacy_failure_is_typed(self, service, transport):
        transport.queue(log_page(token=None), FakeResponse(status_code=500, text="boom"))

        result = service.post_log(submission())

        assert result.status is StatusCode.LOG_POST_ERROR
        assert result.state is LogWorkflowState.LOG_POST_ERROR
        assert result.reference == ""

    def test_missing_reference_code_is_rejected(self, service, transport):
        transport.queue(log_page(), FakeResponse(json_data={"guid": "x"}))

        result = service.post_log(submission())

        assert result.status is StatusCode.LOG_POST_ERROR
        assert "guid" in result.message

    def test_server_error_on_submit(self, service, transport):
        transport.queue(log_page(), FakeResponse(status_code=403, text="forbidden"))

        result = service.post_log(submission())

        assert result.status is StatusCode.LOG_POST_ERROR
        assert transport.call_count == 2

    def test_rate_limit_with_http_date_is_typed(self, service, transport):
        transport.queue(
            log_page(),
            FakeResponse(status_code=429, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}),
        )

        result = service.post_log(submission())

        assert result.status is StatusCode.LOG_POST_ERROR
        assert result.state is LogWorkflowState.LOG_POST_ERROR
        assert "Rate limit" in result.message

    def test_image_failure_keeps_log_reference(self, service, transport):
        transport.queue(log_page(), created(), FakeResponse(json_data={"success": False}))

        result = service.post_log(submission(images=[image(), image()]))

        assert result.status is StatusCode.LOG_IMAGE_POST_ERROR
        assert result.state is LogWorkflowState.LOG_IMAGE_POST_ERROR
        assert result.reference == "GLABC"
        # the second image is not attempted
        assert transport.call_count == 3

    def test_failed_metadata_update(self, service, transport):
        transport.queue(log_page(), created(), uploaded(), FakeResponse(json_data={"success": False}))

        result = service.post_log(submission(images=[image(description="desc")]))

        assert result.status is StatusCode.LOG_IMAGE_POST_ERROR
        assert transport.requests[3].body.form == {"description": "desc"}


class TestPostLogImage:
    def test_uploads_with_token_from_edit_page(self, service, transport):
        transport.queue(log_page(token="edit-tok"), uploaded(url="https://img/x.jpg"))

        result = service.post_log_image("GC1ABC", "GLABC", image())

        assert result.ok
        assert result.reference == "https://img/x.jpg"
        assert transport.requests[0].uri == f"{WEBSITE}/live/log/GLABC"
        assert transport.requests[1].headers == {"CSRF-Token": "edit-tok"}

    def test_missing_token(self, service, transport):
        transport.queue(log_page(token=None))

        result = service.post_log_image("GC1ABC", "GLABC", image())

        assert result.status is StatusCode.LOG_IMAGE_POST_ERROR
        assert transport.call_count == 1


class TestPostTrackableLog:
    def trackable_submission(self, action: LogTypeTrackable) -> TrackableLogSubmission:
        return TrackableLogSubmission(
            trackable_code="TB1XYZ", tracking_code="SECRET", action=action, date=LOG_DATE, text="Nice"
        )

    def test_missing_token_aborts(self, service, transport):
        transport.queue(log_page(token=None))

        result = service.post_trackable_log(self.trackable_submission(LogTypeTrackable.DISCOVERED_IT))

        assert result.status is StatusCode.LOG_POST_ERROR
        assert result.state is LogWorkflowState.ABORTED
        assert transport.call_count == 1

    def test_discover(self, service, transport):
        transport.queue(log_page(), created("TLABC"))

        result = service.post_trackable_log(self.trackable_submission(LogTypeTrackable.DISCOVERED_IT))

        assert result.reference == "TLABC"
        page_request, post_request = transport.requests
        assert page_request.uri == f"{WEBSITE}/live/trackable/TB1XYZ/log"
        assert post_request.uri == f"{WEBSITE}/api/live/v1/logs/TB1XYZ/trackableLog"
        assert post_request.body.json == {
            "images": [],
            "logDate": "2024-05-01T14:30:00.000",
            "logText": "Nice",
            "logType": 48,
            "trackingCode": "SECRET",
        }

    def test_retrieve_names_current_cache(self, service, transport):
        html_extra = '"currentGeocache":{"id":123,"referenceCode":"GC123","name":"somename"}'
        transport.queue(log_page(extra=html_extra), created("TLABC"))

        service.post_trackable_log(self.trackable_submission(LogTypeTrackable.RETRIEVED_IT))

        assert transport.requests[1].body.json["geocacheReferenceCode"] == "GC123"

    def test_missing_reference_code(self, service, transport):
        transport.queue(log_page(), FakeResponse(json_data={}))

        result = service.post_trackable_log(self.trackable_submission(LogTypeTrackable.GRABBED_IT))

        assert result.status is StatusCode.LOG_POST_ERROR
        assert result.state is LogWorkflowState.LOG_POST_ERROR
