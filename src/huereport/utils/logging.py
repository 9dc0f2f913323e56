from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import Literal

import coloredlogs  # type: ignore[import]

from .redaction import Redactor

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"

# request lines carry the bridge credential in the URL path
NOISY_LOGGERS = ("httpx", "httpcore")


class CredentialFilter(logging.Filter):
    """Masks known bridge credentials in every record a handler emits.

    Error reasons from the HTTP layer can quote the request URL, so masking
    at the handler catches messages no call site redacted itself.
    """

    def __init__(self, redactor: Redactor | None = None) -> None:
        super().__init__()
        self._redactor = redactor or Redactor()
        self._credentials: set[str] = set()

    @property
    def credentials(self) -> frozenset[str]:
        return frozenset(self._credentials)

    def add(self, credentials: Iterable[str]) -> None:
        self._credentials.update(c for c in credentials if c)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._credentials:
            return True
        message = record.getMessage()
        masked = message
        # longest first so a credential containing another is masked whole
        for credential in sorted(self._credentials, key=len, reverse=True):
            if credential in masked:
                masked = masked.replace(
                    credential, self._redactor.redact_credential(credential)
                )
        if masked != message:
            record.msg = masked
            record.args = None
        return True


CREDENTIAL_FILTER = CredentialFilter()


def register_credentials(credentials: Iterable[str]) -> None:
    CREDENTIAL_FILTER.add(credentials)


def setup_logging(level: LogLevel | None = None) -> None:
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(CREDENTIAL_FILTER)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
