"""Turn settings into the endpoint, credential and model for one request."""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

import httpx

from ..errors import ConfigurationError
from .models import ApiMode, EffectiveEndpoint

if TYPE_CHECKING:
    from ..settings import Settings

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4.1-nano"
CREDENTIAL_FILENAME = "api.key"
INVALID_ENDPOINT_MESSAGE = "Invalid API endpoint."

CredentialLoader = Callable[[], str]


def read_credential_file(
    *,
    bundled: Optional[Path] = None,
    cwd: Optional[Path] = None,
) -> str:
    """Return the trimmed contents of the fallback ``api.key`` file.

    The copy shipped next to the package wins when it exists; otherwise the
    file in the working directory is read. Anything unreadable gives ``""``.
    """

    bundled_path = bundled if bundled is not None else _bundled_key_path()
    if bundled_path is not None and bundled_path.is_file():
        target = bundled_path
    else:
        target = (cwd if cwd is not None else Path.cwd()) / CREDENTIAL_FILENAME
    try:
        return target.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return ""


def resolve_endpoint(
    settings: "Settings",
    *,
    credential_loader: CredentialLoader = read_credential_file,
) -> EffectiveEndpoint:
    """Resolve the endpoint for ``settings.api_mode``.

    Raises :class:`ConfigurationError` when custom mode is configured with an
    endpoint that is not an absolute http(s) URL. An empty credential is not
    an error; the request will fail with an auth error instead.
    """

    if settings.api_mode is ApiMode.CUSTOM:
        return EffectiveEndpoint(
            url=_validate_url(settings.custom_endpoint),
            api_key=settings.custom_key,
            model=DEFAULT_MODEL,
        )

    api_key = settings.openai_key or credential_loader()
    model = DEFAULT_MODEL
    if (
        settings.api_mode is ApiMode.OPENAI
        and api_key
        and settings.custom_model
    ):
        model = settings.custom_model
    return EffectiveEndpoint(url=OPENAI_CHAT_URL, api_key=api_key, model=model)


def _validate_url(raw: str) -> str:
    candidate = (raw or "").strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        raise ConfigurationError(INVALID_ENDPOINT_MESSAGE)
    try:
        parts = httpx.URL(candidate)
    except (httpx.InvalidURL, ValueError) as exc:
        raise ConfigurationError(INVALID_ENDPOINT_MESSAGE) from exc
    if parts.scheme not in ("http", "https") or not parts.host:
        raise ConfigurationError(INVALID_ENDPOINT_MESSAGE)
    return candidate


def _bundled_key_path() -> Path:
    resource = resources.files("revisedlm").joinpath(CREDENTIAL_FILENAME)
    return Path(str(resource))
