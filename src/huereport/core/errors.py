from __future__ import annotations


class HueReportError(Exception):
    """Base class for huereport errors."""


class BridgeFetchError(HueReportError):
    def __init__(self, bridge: str, reason: str) -> None:
        super().__init__(f"{bridge}: {reason}")
        self.bridge = bridge
        self.reason = reason


class BridgeUnreachableError(BridgeFetchError):
    pass


class BridgeUnauthorizedError(BridgeFetchError):
    pass


class MalformedResponseError(BridgeFetchError):
    pass


class NoBridgesReachableError(HueReportError):
    def __init__(self, failures: list[BridgeFetchError]) -> None:
        names = ", ".join(failure.bridge for failure in failures) or "none configured"
        super().__init__(f"Could not fetch data from any bridge ({names})")
        self.failures = failures
