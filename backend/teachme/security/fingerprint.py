"""Device fingerprint captured at token issuance and compared on refresh"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeviceFingerprint:
    """(user-agent, IP) pair. Either part may be missing.

    A fingerprint is *known* only when both parts are present; a partial
    fingerprint is treated exactly like no fingerprint at all.
    """

    user_agent: Optional[str] = None
    ip_address: Optional[str] = None

    @classmethod
    def unknown(cls) -> "DeviceFingerprint":
        return cls()

    @property
    def is_known(self) -> bool:
        return bool(self.user_agent) and bool(self.ip_address)

    def as_metadata(self, prefix: str) -> dict:
        """Render as ``{<prefix>UserAgent, <prefix>IP}`` for security-event metadata"""
        return {f"{prefix}UserAgent": self.user_agent, f"{prefix}IP": self.ip_address}


def fingerprints_conflict(stored: DeviceFingerprint, current: DeviceFingerprint) -> bool:
    """Return True when the refresh request comes from a different device.

    | stored  | current | result                      |
    |---------|---------|-----------------------------|
    | unknown | any     | False (nothing to compare)  |
    | any     | unknown | False (nothing to compare)  |
    | known   | known   | UA differs or IP differs    |
    """
    if not (stored.is_known and current.is_known):
        return False
    return stored.user_agent != current.user_agent or stored.ip_address != current.ip_address
