"""
Plain-text rendering of a Notice for e-mail bodies and log records.
"""

from typing import Any

from exception_notifier.domain.notices.entities import Notice

# Opaque references that are never rendered.
_OPAQUE = {"request", "session", "controller", "exception"}

_KNOWN = {
    "error_class",
    "message",
    "location",
    "backtrace",
    "environment",
    "remote_address",
    "rails_root",
    "params",
    "url",
    "session_id",
    "session_data",
} | _OPAQUE


def _section(title: str, lines: list[str]) -> list[str]:
    return [title, "-" * len(title), *lines, ""]


def _mapping_lines(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return [f"  {data!r}"]
    return [f"  * {key}: {data[key]!r}" for key in sorted(data, key=str)]


def format_notice(notice: Notice) -> str:
    """Render a notice as sectioned plain text."""
    lines = [
        f"A {notice.error_class} occurred in {notice.location or 'an unknown location'}:",
        "",
        f"  {notice.message}",
        "",
    ]

    if "url" in notice:
        request_lines = [
            f"  * URL       : {notice['url']}",
            f"  * Remote    : {notice.get('remote_address')}",
            f"  * Parameters: {notice.get('params')!r}",
            f"  * Root      : {notice.get('rails_root')}",
        ]
        lines += _section("Request", request_lines)

    if "session_data" in notice:
        session_lines = [f"  * session id: {notice.get('session_id')}"]
        session_lines += _mapping_lines(notice["session_data"])
        lines += _section("Session", session_lines)

    extra = {k: v for k, v in notice.items() if k not in _KNOWN}
    if extra:
        lines += _section("Data", _mapping_lines(extra))

    lines += _section("Backtrace", [f"  {frame}" for frame in notice.backtrace])

    environment = notice.get("environment") or {}
    lines += _section(
        "Environment",
        [f"  * {key:<30}: {environment[key]}" for key in sorted(environment)],
    )

    return "\n".join(lines).rstrip() + "\n"
