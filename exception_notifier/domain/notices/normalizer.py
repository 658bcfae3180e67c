"""
Notice normalizer.

Builds a uniform Notice from either a caller-supplied mapping or a
caught exception, merging in whatever the execution context exposes:

    environment  ──▶  controller facet  ──▶  request facet
        ──▶  session facet  ──▶  manual / caught fields
        ──▶  redaction  ──▶  extra data (wins on conflicts)

Every facet is optional. Only malformed input and a broken extra data
source raise.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any, Callable, Optional

from exception_notifier.domain.notices.backtrace import (
    clean_root,
    current_stack,
    sanitize_backtrace,
    traceback_frames,
)
from exception_notifier.domain.notices.configuration import NotifierConfig
from exception_notifier.domain.notices.entities import (
    FILTERED,
    CallableSource,
    CaughtError,
    ExecutionContext,
    ManualNotice,
    NamedAccessor,
    Notice,
    NullContext,
    RequestInfo,
    SessionInfo,
    notice_input,
)
from exception_notifier.domain.notices.errors import ExtraDataError

logger = logging.getLogger(__name__)

EnvironProvider = Callable[[], Mapping[str, str]]


def session_snapshot(session: Any) -> Any:
    """Return the session's data as a plain dict.

    Prefers an explicit conversion method, then the mapping protocol.
    Falls back to reading the ``_data`` attribute for session objects
    that expose neither; that fallback depends on the session class's
    internals.
    """
    for attr in ("to_hash", "to_dict"):
        method = getattr(session, attr, None)
        if callable(method):
            return dict(method())
    if isinstance(session, Mapping):
        return dict(session)
    return getattr(session, "_data", None)


class NoticeNormalizer:
    """Turns errors and manual notices into Notice records.

    Args:
        config: Boot-time notifier configuration.
        environ: Provider of the process environment snapshot.
    """

    def __init__(
        self,
        config: NotifierConfig,
        environ: Optional[EnvironProvider] = None,
    ) -> None:
        self._config = config
        self._environ = environ or (lambda: os.environ)
        self._root = clean_root(config.app_root)

    @property
    def app_root(self) -> str:
        return self._root

    def sanitize(self, trace: list[str]) -> list[str]:
        return sanitize_backtrace(trace, self._root)

    def normalize(self, value: Any, context: Optional[ExecutionContext] = None) -> Notice:
        """Build a Notice for value in the given execution context.

        Args:
            value: A mapping with at least ``message``, an exception,
                or an already wrapped NoticeInput.
            context: The ambient execution context; None means no facets.

        Returns:
            The assembled Notice.

        Raises:
            MalformedNoticeError: If value is neither a mapping nor an exception.
            ExtraDataError: If the configured extra data source fails.
        """
        notice_in = notice_input(value)
        if context is None:
            context = NullContext()

        notice = Notice(environment={str(k): str(v) for k, v in self._environ().items()})

        controller = context.try_controller_info()
        if controller is not None:
            notice["location"] = f"{controller.controller_name}#{controller.action_name}"
            notice["controller"] = controller.controller if controller.controller is not None else context

        request = context.try_request()
        if request is not None:
            notice.update(self._request_fields(request))
            notice["environment"].update({str(k): str(v) for k, v in request.env.items()})

        session = context.try_session()
        if session is not None:
            notice.update(self._session_fields(session))

        if isinstance(notice_in, ManualNotice):
            # Drop this frame; the innermost remaining frame invoked normalize().
            stack = self.sanitize(current_stack(skip=1))
            notice["location"] = stack[-2] if len(stack) > 1 else stack[-1]
            notice["backtrace"] = stack
            notice["error_class"] = notice_in.data["message"]
            notice.update(notice_in.data)
        elif isinstance(notice_in, CaughtError):
            error = notice_in.error
            notice["exception"] = error
            notice["error_class"] = type(error).__name__
            notice["message"] = str(error)
            notice["backtrace"] = self.sanitize(traceback_frames(error.__traceback__))

        self._redact(notice)
        notice.update(self._extra_data(context))
        return notice

    def _request_fields(self, request: RequestInfo) -> dict[str, Any]:
        env = request.env
        return {
            "request": request.raw if request.raw is not None else request,
            "remote_address": env.get("HTTP_X_FORWARDED_HOST") or env.get("HTTP_HOST"),
            "rails_root": self._root,
            "params": dict(request.parameters),
            "url": f"{request.protocol}{request.host}{request.request_uri}",
        }

    def _session_fields(self, info: SessionInfo) -> dict[str, Any]:
        session = info.session
        return {
            "session": session,
            "session_id": info.session_id or getattr(session, "session_id", None),
            "session_data": session_snapshot(session),
        }

    def _is_filtered(self, key: Any) -> bool:
        lowered = str(key).lower()
        return any(fragment in lowered for fragment in self._config.filtered_parameters)

    def _filter_mapping(self, data: Mapping[str, Any]) -> dict[str, Any]:
        filtered = {}
        for key, value in data.items():
            if self._is_filtered(key):
                filtered[key] = FILTERED
            elif isinstance(value, Mapping):
                filtered[key] = self._filter_mapping(value)
            else:
                filtered[key] = value
        return filtered

    def _redact(self, notice: Notice) -> None:
        if not self._config.filtered_parameters:
            return
        for key in ("params", "session_data", "environment"):
            if isinstance(notice.get(key), Mapping):
                notice[key] = self._filter_mapping(notice[key])

    def _extra_data(self, context: ExecutionContext) -> Mapping[str, Any]:
        source = self._config.extra_data
        if source is None:
            return {}
        if isinstance(source, NamedAccessor):
            accessor = getattr(context, source.name, None)
            if not callable(accessor):
                raise ExtraDataError(
                    f"{type(context).__name__} has no method {source.name!r}"
                )
            data = accessor()
        elif isinstance(source, CallableSource):
            data = source.fn(context)
        else:
            raise ExtraDataError(f"unsupported source {source!r}")

        if not isinstance(data, Mapping):
            raise ExtraDataError(
                f"expected a mapping, got {type(data).__name__}"
            )
        logger.debug("Merging %d extra data fields into notice", len(data))
        return data
