"""
Tests for NoticeNormalizer.

Uses hand-built execution contexts exposing any combination of the
controller, request and session facets. No framework required.
"""

from typing import Any, Optional

import pytest

from exception_notifier.domain.notices.configuration import NotifierConfig
from exception_notifier.domain.notices.entities import (
    FILTERED,
    ControllerInfo,
    NullContext,
    RequestInfo,
    SessionInfo,
)
from exception_notifier.domain.notices.errors import ExtraDataError, MalformedNoticeError
from exception_notifier.domain.notices.normalizer import NoticeNormalizer, session_snapshot

ROOT = "/srv/shop"
ENVIRON = {"PATH": "/usr/bin", "API_TOKEN": "abc123", "LANG": "C.UTF-8"}


class FakeContext:
    """Execution context with configurable facets."""

    def __init__(
        self,
        controller: Optional[ControllerInfo] = None,
        request: Optional[RequestInfo] = None,
        session: Optional[SessionInfo] = None,
    ) -> None:
        self._controller = controller
        self._request = request
        self._session = session

    def try_controller_info(self) -> Optional[ControllerInfo]:
        return self._controller

    def try_request(self) -> Optional[RequestInfo]:
        return self._request

    def try_session(self) -> Optional[SessionInfo]:
        return self._session

    def current_user_data(self) -> dict[str, Any]:
        return {"user_id": 7, "plan": "pro"}


class HashSession:
    def __init__(self, data: dict) -> None:
        self.session_id = "abc"
        self._data = data

    def to_hash(self) -> dict:
        return dict(self._data)


class LegacySession:
    def __init__(self, data: dict) -> None:
        self.session_id = "legacy-1"
        self._data = data


def _normalizer(config: Optional[NotifierConfig] = None) -> NoticeNormalizer:
    return NoticeNormalizer(config or NotifierConfig(app_root=ROOT), environ=lambda: ENVIRON)


def _request(**overrides: Any) -> RequestInfo:
    fields: dict[str, Any] = {
        "env": {
            "HTTP_HOST": "example.com",
            "REQUEST_METHOD": "GET",
        },
        "parameters": {"id": "7", "password": "hunter2"},
        "protocol": "https://",
        "host": "example.com",
        "request_uri": "/x?y=1",
        "remote_ip": "203.0.113.9",
    }
    fields.update(overrides)
    return RequestInfo(**fields)


def _raised(error: Exception) -> Exception:
    try:
        raise error
    except Exception as exc:
        return exc


# ══════════════════════════════════════════════════════════════════════
# Caught errors
# ══════════════════════════════════════════════════════════════════════


class TestCaughtErrors:
    """Normalization of exceptions caught by the framework."""

    def test_error_fields(self) -> None:
        error = _raised(RuntimeError("database exploded"))
        notice = _normalizer().normalize(error)
        assert notice["exception"] is error
        assert notice["error_class"] == "RuntimeError"
        assert notice["message"] == "database exploded"
        assert notice["backtrace"]
        assert notice["backtrace"][-1].endswith(":in _raised")

    def test_backtrace_relative_to_root(self) -> None:
        error = _raised(ValueError("boom"))
        root = __file__.rsplit("/", 2)[0]
        notice = _normalizer(NotifierConfig(app_root=root)).normalize(error)
        assert notice["backtrace"][-1].startswith("tests/test_normalizer.py:")

    def test_without_facets_only_environment_is_added(self) -> None:
        notice = _normalizer().normalize(_raised(RuntimeError("x")), NullContext())
        assert set(notice) == {"environment", "exception", "error_class", "message", "backtrace"}
        for key in ("request", "session", "session_id", "session_data"):
            assert key not in notice

    def test_none_context_behaves_like_null_context(self) -> None:
        notice = _normalizer().normalize(_raised(RuntimeError("x")))
        assert "request" not in notice
        assert "location" not in notice


# ══════════════════════════════════════════════════════════════════════
# Context facets
# ══════════════════════════════════════════════════════════════════════


class TestContextFacets:
    """Each facet is merged independently."""

    def test_controller_sets_location(self) -> None:
        controller = ControllerInfo("orders", "show", controller="orders-controller")
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(controller=controller))
        assert notice["location"] == "orders#show"
        assert notice["controller"] == "orders-controller"

    def test_controller_reference_defaults_to_context(self) -> None:
        context = FakeContext(controller=ControllerInfo("orders", "show"))
        notice = _normalizer().normalize(_raised(RuntimeError("x")), context)
        assert notice["controller"] is context

    def test_request_fields(self) -> None:
        request = _request()
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(request=request))
        assert notice["url"] == "https://example.com/x?y=1"
        assert notice["remote_address"] == "example.com"
        assert notice["rails_root"] == ROOT
        assert notice["params"]["id"] == "7"
        assert notice["request"] is request

    def test_request_raw_object_is_kept(self) -> None:
        raw = object()
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(request=_request(raw=raw)))
        assert notice["request"] is raw

    def test_forwarded_host_preferred(self) -> None:
        request = _request(env={"HTTP_HOST": "internal:8000", "HTTP_X_FORWARDED_HOST": "shop.example.com"})
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(request=request))
        assert notice["remote_address"] == "shop.example.com"

    def test_request_env_merged_into_environment(self) -> None:
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(request=_request()))
        assert notice["environment"]["PATH"] == "/usr/bin"
        assert notice["environment"]["REQUEST_METHOD"] == "GET"

    def test_session_with_to_hash(self) -> None:
        session = HashSession({"cart": [1, 2]})
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(session=SessionInfo(session)))
        assert notice["session"] is session
        assert notice["session_id"] == "abc"
        assert notice["session_data"] == {"cart": [1, 2]}

    def test_session_legacy_data_store(self) -> None:
        session = LegacySession({"flash": "hi"})
        notice = _normalizer().normalize(
            _raised(RuntimeError("x")), FakeContext(session=SessionInfo(session, session_id=None))
        )
        assert notice["session_id"] == "legacy-1"
        assert notice["session_data"] == {"flash": "hi"}

    def test_mapping_session(self) -> None:
        assert session_snapshot({"a": 1}) == {"a": 1}
        assert session_snapshot(object()) is None


# ══════════════════════════════════════════════════════════════════════
# Redaction
# ══════════════════════════════════════════════════════════════════════


class TestRedaction:
    """Filtered parameters never reach the notice."""

    def test_params_and_environment_filtered(self) -> None:
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext(request=_request()))
        assert notice["params"]["password"] == FILTERED
        assert notice["environment"]["API_TOKEN"] == FILTERED
        assert notice["environment"]["LANG"] == "C.UTF-8"

    def test_nested_session_data_filtered(self) -> None:
        session = {"user": {"name": "ana", "secret_answer": "blue"}}
        notice = _normalizer().normalize(
            _raised(RuntimeError("x")), FakeContext(session=SessionInfo(session))
        )
        assert notice["session_data"]["user"] == {"name": "ana", "secret_answer": FILTERED}

    def test_no_filtering_when_disabled(self) -> None:
        config = NotifierConfig(app_root=ROOT, filtered_parameters=())
        notice = _normalizer(config).normalize(_raised(RuntimeError("x")), FakeContext(request=_request()))
        assert notice["params"]["password"] == "hunter2"


# ══════════════════════════════════════════════════════════════════════
# Manual notices
# ══════════════════════════════════════════════════════════════════════


class TestManualNotices:
    """Normalization of caller-supplied mappings."""

    def test_backtrace_and_location_from_current_stack(self) -> None:
        notice = _normalizer().normalize({"message": "custom error"})
        assert notice["backtrace"]
        assert notice["location"]
        assert not notice["location"].endswith(":in normalize")
        assert notice["backtrace"][-1].endswith(":in test_backtrace_and_location_from_current_stack")

    def test_message_copied_into_error_class(self) -> None:
        notice = _normalizer().normalize({"message": "custom error"})
        assert notice["error_class"] == "custom error"
        assert notice["message"] == "custom error"

    def test_explicit_error_class_wins(self) -> None:
        notice = _normalizer().normalize({"message": "custom error", "error_class": "PaymentWarning"})
        assert notice["error_class"] == "PaymentWarning"

    def test_caller_fields_override_context(self) -> None:
        context = FakeContext(controller=ControllerInfo("orders", "show"))
        notice = _normalizer().normalize({"message": "m", "location": "billing#run"}, context)
        assert notice["location"] == "billing#run"

    def test_malformed_inputs_raise(self) -> None:
        with pytest.raises(MalformedNoticeError):
            _normalizer().normalize(42)
        with pytest.raises(MalformedNoticeError):
            _normalizer().normalize({"error_class": "NoMessage"})


# ══════════════════════════════════════════════════════════════════════
# Extra data
# ══════════════════════════════════════════════════════════════════════


class TestExtraData:
    """Resolution and merging of the extra data source."""

    def test_callable_source_wins_on_conflicts(self) -> None:
        config = NotifierConfig(app_root=ROOT).with_exception_data(
            lambda ctx: {"user_id": 42, "message": "overridden"}
        )
        notice = _normalizer(config).normalize(_raised(RuntimeError("x")), FakeContext())
        assert notice["user_id"] == 42
        assert notice["message"] == "overridden"

    def test_callable_receives_context(self) -> None:
        seen = []
        config = NotifierConfig(app_root=ROOT).with_exception_data(lambda ctx: seen.append(ctx) or {})
        context = FakeContext()
        _normalizer(config).normalize(_raised(RuntimeError("x")), context)
        assert seen == [context]

    def test_named_accessor(self) -> None:
        config = NotifierConfig(app_root=ROOT).with_exception_data("current_user_data")
        notice = _normalizer(config).normalize(_raised(RuntimeError("x")), FakeContext())
        assert notice["user_id"] == 7
        assert notice["plan"] == "pro"

    def test_missing_named_accessor_raises(self) -> None:
        config = NotifierConfig(app_root=ROOT).with_exception_data("no_such_method")
        with pytest.raises(ExtraDataError):
            _normalizer(config).normalize(_raised(RuntimeError("x")), FakeContext())

    def test_non_mapping_result_raises(self) -> None:
        config = NotifierConfig(app_root=ROOT).with_exception_data(lambda ctx: ["not", "a", "dict"])
        with pytest.raises(ExtraDataError):
            _normalizer(config).normalize(_raised(RuntimeError("x")), FakeContext())

    def test_no_source_adds_nothing(self) -> None:
        notice = _normalizer().normalize(_raised(RuntimeError("x")), FakeContext())
        assert "user_id" not in notice
