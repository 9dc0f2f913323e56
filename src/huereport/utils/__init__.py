from __future__ import annotations

from .logging import CredentialFilter, register_credentials, setup_logging
from .redaction import Redactor

__all__ = ["CredentialFilter", "Redactor", "register_credentials", "setup_logging"]
