"""
Redirect Rule Sources

Loads the redirect rule list from a local JSON file or an HTTPS URL and
validates its shape before anything reaches the pipeline.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import httpx

from s3redirects.core import constants as C
from s3redirects.core.errors import InputError
from s3redirects.core.types import RedirectRule
from s3redirects.core.validation import is_redirect

logger = logging.getLogger(__name__)


def is_readable_directory(path: str | os.PathLike[str]) -> bool:
    """Check if the path given is a real readable directory."""
    if not path:
        return False
    try:
        if not Path(path).is_dir():
            return False
    except (OSError, ValueError):
        return False
    return os.access(path, os.R_OK)


async def load_json(
    source: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """
    Load JSON from either a local file or a HTTPS URL.

    Args:
        source: File path, or a URL starting with https://.
        client: Optional HTTP client (tests inject one with a mock transport).

    Raises:
        InputError: For any read, fetch, or decode failure.
    """
    try:
        if source.startswith("https://"):
            return await _fetch_json(source, client)
        text = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
        return json.loads(text)
    except InputError:
        raise
    except (OSError, ValueError, httpx.HTTPError) as e:
        raise InputError.unable_to_load(source, str(e), cause=e) from e


async def _fetch_json(url: str, client: Optional[httpx.AsyncClient]) -> Any:
    if client is None:
        async with httpx.AsyncClient(timeout=C.HTTP_TIMEOUT_SECONDS) as owned:
            return await _fetch_json(url, owned)

    logger.debug("Fetching redirects from %s", url)
    response = await client.get(url)
    if not response.is_success:
        raise InputError.unable_to_load(
            url, f"Unable to fetch {url} (HTTP {response.status_code})"
        )
    return response.json()


async def load_redirects(
    source: str,
    client: Optional[httpx.AsyncClient] = None,
) -> list[RedirectRule]:
    """
    Load and validate redirect rules.

    Raises:
        InputError: If the source cannot be loaded or is not a list of
            redirect objects.
    """
    data = await load_json(source, client)
    if not isinstance(data, list):
        raise InputError.invalid_redirects()
    for index, entry in enumerate(data):
        if not is_redirect(entry):
            raise InputError.invalid_redirects(index)
    return [RedirectRule.from_mapping(entry) for entry in data]
