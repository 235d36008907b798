"""Build the form that changes the expiry of, or deletes, a submission."""

from envsh.models.submission import Delete, HttpRequest, ManagementAction, SetExpiry
from envsh.services.timespec import now_millis, resolve

FIELD_TOKEN = "token"
FIELD_EXPIRES = "expires"
FIELD_DELETE = "delete"


def build_management(
    action: ManagementAction,
    url: str,
    token: str,
    now_ms: int | None = None,
) -> HttpRequest:
    """The host manages a submission through a POST to the submission's own URL."""
    request = HttpRequest(url=url, fields={FIELD_TOKEN: token})

    if isinstance(action, Delete):
        request.fields[FIELD_DELETE] = ""
    elif isinstance(action, SetExpiry):
        if now_ms is None:
            now_ms = now_millis()
        request.fields[FIELD_EXPIRES] = str(resolve(action.expires, now_ms).millis)
    else:
        raise TypeError(f"Unknown management action: {action!r}")

    return request
