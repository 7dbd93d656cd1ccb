from __future__ import annotations

from typing import Optional

from ...core.exceptions import ModStateError, PermanentError, TransientError

_BODY_PREVIEW_CHARS = 200


def _preview(body: Optional[str]) -> str:
    return (body or "").strip().replace("\n", " ")[:_BODY_PREVIEW_CHARS]


class UpstreamError(ModStateError):
    """Base error for mod.io requests."""


class UpstreamUnavailableError(UpstreamError, TransientError):
    """mod.io answered with a non-success status or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        detail = f"{message}: status={status_code} body={_preview(body)!r}"
        super().__init__(detail)
        self.status_code = status_code
        self.body = body


class UpstreamNotFoundError(UpstreamError, PermanentError):
    """The requested mod id does not exist for the configured game."""

    def __init__(
        self,
        mod_id: str,
        *,
        status_code: Optional[int] = 404,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(f"mod.io has no mod with id {mod_id!r}")
        self.mod_id = mod_id
        self.status_code = status_code
        self.body = body


class MalformedUpstreamRecordError(UpstreamError, PermanentError):
    """A mod.io response is missing an object the state.json mapping needs."""

    def __init__(self, path: str, *, detail: str = "missing or not an object") -> None:
        super().__init__(f"malformed mod.io record at {path!r}: {detail}")
        self.path = path
