"""
Client configuration resolution.

Every field follows the same precedence: explicit argument, then
environment variable, then built-in default. Resolution only reads the
environment mapping it is given and never performs I/O.
"""
import json
import os
import re
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field  # type: ignore

from .exceptions import PineconeInvalidHeadersError, PineconeMissingCredentialError

API_KEY_ENV = "PINECONE_API_KEY"
CONTROLLER_HOST_ENV = "PINECONE_CONTROLLER_HOST"
ADDITIONAL_HEADERS_ENV = "PINECONE_ADDITIONAL_HEADERS"

DEFAULT_CONTROLLER_HOST = "https://api.pinecone.io"
API_VERSION = "2024-07"
API_VERSION_HEADER = "X-Pinecone-Api-Version"

SDK_VERSION = "0.1.0"


class ClientConfig(BaseModel):
    """Resolved, immutable settings shared by the control and data planes."""
    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, repr=False)
    controller_host: str = DEFAULT_CONTROLLER_HOST
    additional_headers: Dict[str, str] = Field(default_factory=dict)
    source_tag: Optional[str] = None
    user_agent: str = f"lang=python; pinecone-sdk={SDK_VERSION}"


def build_source_tag(source_tag: str) -> str:
    """
    Normalises a source tag for the User-Agent header: lowercase, only
    ``[a-z0-9_ :]`` kept, surrounding spaces trimmed and inner runs of
    spaces collapsed to ``_``.
    """
    tag = source_tag.strip().lower()
    tag = re.sub(r"[^a-z0-9_ :]", "", tag)
    return re.sub(r"\s+", "_", tag.strip())


def build_user_agent(source_tag: Optional[str] = None) -> str:
    user_agent = f"lang=python; pinecone-sdk={SDK_VERSION}"
    if source_tag:
        user_agent += f"; source_tag={build_source_tag(source_tag)}"
    return user_agent


def _parse_headers(raw: str) -> Dict[str, str]:
    try:
        headers = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PineconeInvalidHeadersError(
            f"{ADDITIONAL_HEADERS_ENV} is not valid JSON: {e}"
        ) from e
    if not isinstance(headers, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
    ):
        raise PineconeInvalidHeadersError(
            f"{ADDITIONAL_HEADERS_ENV} must be a JSON object of string values"
        )
    return headers


def resolve_config(
    api_key: Optional[str] = None,
    controller_host: Optional[str] = None,
    additional_headers: Optional[Mapping[str, str]] = None,
    source_tag: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ClientConfig:
    """
    Builds a ClientConfig from explicit arguments and the environment.

    Raises:
        PineconeMissingCredentialError: no API key in the arguments or environment.
        PineconeInvalidHeadersError: ``PINECONE_ADDITIONAL_HEADERS`` is malformed.
    """
    env = os.environ if environ is None else environ

    resolved_key = api_key or env.get(API_KEY_ENV)
    if not resolved_key:
        raise PineconeMissingCredentialError(
            f"API key is not provided as an argument nor in the {API_KEY_ENV} environment variable"
        )

    resolved_host = controller_host or env.get(CONTROLLER_HOST_ENV) or DEFAULT_CONTROLLER_HOST

    if additional_headers is not None:
        headers = dict(additional_headers)
    elif env.get(ADDITIONAL_HEADERS_ENV):
        headers = _parse_headers(env[ADDITIONAL_HEADERS_ENV])
    else:
        headers = {}

    if not any(k.lower() == API_VERSION_HEADER.lower() for k in headers):
        headers[API_VERSION_HEADER] = API_VERSION

    return ClientConfig(
        api_key=resolved_key,
        controller_host=resolved_host.rstrip("/"),
        additional_headers=headers,
        source_tag=source_tag,
        user_agent=build_user_agent(source_tag),
    )
