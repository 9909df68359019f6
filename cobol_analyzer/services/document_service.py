"""
DocumentService
===============

Client for the remote, LLM-backed document functions that consume the same
``{name, content}`` file set as the analyzer:

===============================  ================================  =================
Method                           Endpoint                          Response field
===============================  ================================  =================
:meth:`generate_brd`             ``POST /generate-brd``            ``brd``
:meth:`generate_pseudocode`      ``POST /generate-pseudocode``     ``pseudocode``
:meth:`convert`                  ``POST /convert-to-target-language``  ``convertedCode``
:meth:`analyze_dependencies`     ``POST /analyze-dependencies``    whole object
===============================  ================================  =================

These calls are slow and fallible.  Transport errors, ``429`` and ``5xx``
responses are retried up to ``max_retries`` times with a linear back-off;
any other ``4xx`` fails at once.  Every failure surfaces as
:class:`DocumentServiceError`.
"""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import httpx

from ..models import SourceFile

logger = logging.getLogger(__name__)

_RETRY_STATUSES = {429, 500, 502, 503, 504}


class DocumentServiceError(RuntimeError):
    """A document-service call failed after all retries."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class DocumentServiceConfig:
    """Connection settings for :class:`DocumentService`."""

    base_url: str
    api_key: str = ""
    timeout: float = 120.0
    max_retries: int = 2
    backoff: float = 1.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
        if self.backoff < 0:
            raise ValueError(f"backoff must be >= 0, got {self.backoff}")

    @classmethod
    def from_env(cls) -> "DocumentServiceConfig":
        """
        Read ``COBOL_DOCS_URL``, ``COBOL_DOCS_API_KEY``,
        ``COBOL_DOCS_TIMEOUT`` and ``COBOL_DOCS_MAX_RETRIES``.
        """
        base_url = os.getenv("COBOL_DOCS_URL", "").strip()
        if not base_url:
            raise ValueError("COBOL_DOCS_URL is not set")
        return cls(
            base_url=base_url,
            api_key=os.getenv("COBOL_DOCS_API_KEY", ""),
            timeout=float(os.getenv("COBOL_DOCS_TIMEOUT", "120")),
            max_retries=int(os.getenv("COBOL_DOCS_MAX_RETRIES", "2")),
        )


FileLike = Union[SourceFile, Mapping[str, Any]]


def _files_payload(files: Iterable[FileLike]) -> List[Dict[str, str]]:
    payload = []
    for f in files:
        if isinstance(f, SourceFile):
            payload.append(f.to_dict())
        else:
            payload.append({"name": str(f.get("name", "")), "content": str(f.get("content", ""))})
    if not payload:
        raise ValueError("No files provided")
    return payload


class DocumentService:
    """
    Synchronous client for the document-generation functions.

    Parameters
    ----------
    config:
        Endpoint and retry settings.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: DocumentServiceConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._client = httpx.Client(
            base_url=config.base_url.rstrip("/"),
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DocumentService":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Primary API
    # ------------------------------------------------------------------

    def generate_brd(self, files: Iterable[FileLike]) -> str:
        """Business requirements document for *files*."""
        data = self._post("/generate-brd", {"files": _files_payload(files)})
        return self._field(data, "brd")

    def generate_pseudocode(self, files: Iterable[FileLike]) -> str:
        """Pseudocode narrative for *files*."""
        data = self._post("/generate-pseudocode", {"files": _files_payload(files)})
        return self._field(data, "pseudocode")

    def convert(
        self,
        files: Iterable[FileLike],
        business_logic: str,
        pseudo_code: str,
        target_language: str,
    ) -> str:
        """Target-language code for *files*, guided by earlier documents."""
        if not business_logic or not pseudo_code or not target_language:
            raise ValueError("business_logic, pseudo_code and target_language are required")
        data = self._post(
            "/convert-to-target-language",
            {
                "files": _files_payload(files),
                "businessLogic": business_logic,
                "pseudoCode": pseudo_code,
                "targetLanguage": target_language,
            },
        )
        return self._field(data, "convertedCode")

    def analyze_dependencies(self, files: Iterable[FileLike]) -> Dict[str, Any]:
        """Model-generated dependency summary (advisory; see the static graph)."""
        return self._post("/analyze-dependencies", {"files": _files_payload(files)})

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        attempts = self.config.max_retries + 1
        last_error: Optional[DocumentServiceError] = None

        for attempt in range(1, attempts + 1):
            try:
                logger.info("POST %s (attempt %d/%d)", path, attempt, attempts)
                response = self._client.post(path, json=body)
            except httpx.TransportError as e:
                last_error = DocumentServiceError(f"{path}: {e}")
            else:
                if response.status_code < 400:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise DocumentServiceError(
                            f"{path}: response is not JSON", response.status_code
                        ) from e
                last_error = DocumentServiceError(
                    f"{path}: HTTP {response.status_code}: {self._error_text(response)}",
                    response.status_code,
                )
                if response.status_code not in _RETRY_STATUSES:
                    raise last_error

            if attempt < attempts:
                logger.warning("%s – retrying", last_error)
                time.sleep(self.config.backoff * attempt)

        if last_error is None:
            raise DocumentServiceError(f"{path}: no request attempted")
        raise last_error

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return response.text[:200]

    @staticmethod
    def _field(data: Dict[str, Any], name: str) -> str:
        if not isinstance(data, dict) or name not in data:
            raise DocumentServiceError(f"Response has no {name!r} field")
        return str(data[name])
