from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Redactor:
    enabled: bool = True

    def redact_ip(self, ip: str) -> str:
        if not self.enabled:
            return ip
        parts = ip.split(".")
        if len(parts) == 4 and all(part.isdigit() for part in parts):
            return f"x.x.x.{parts[3]}"
        return ip

    def redact_credential(self, credential: str) -> str:
        if not self.enabled:
            return credential
        if len(credential) <= 4:
            return "****"
        return f"{credential[:4]}****"

    def redact_url(self, url: str, credential: str) -> str:
        if not credential:
            return url
        return url.replace(credential, self.redact_credential(credential))
