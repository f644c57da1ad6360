"""Tests for device fingerprint comparison"""
import pytest

from teachme.security.fingerprint import DeviceFingerprint, fingerprints_conflict

KNOWN = DeviceFingerprint("Mozilla/5.0", "203.0.113.10")


@pytest.mark.parametrize(
    "fingerprint, known",
    [
        (KNOWN, True),
        (DeviceFingerprint(), False),
        (DeviceFingerprint(user_agent="Mozilla/5.0"), False),
        (DeviceFingerprint(ip_address="203.0.113.10"), False),
        (DeviceFingerprint("", "203.0.113.10"), False),
    ],
)
def test_is_known(fingerprint, known):
    assert fingerprint.is_known is known


@pytest.mark.parametrize(
    "stored, current, conflict",
    [
        # both known
        (KNOWN, KNOWN, False),
        (KNOWN, DeviceFingerprint("curl/8.0", "203.0.113.10"), True),
        (KNOWN, DeviceFingerprint("Mozilla/5.0", "192.0.2.1"), True),
        (KNOWN, DeviceFingerprint("curl/8.0", "192.0.2.1"), True),
        # stored unknown or partial
        (DeviceFingerprint(), KNOWN, False),
        (DeviceFingerprint(user_agent="other"), KNOWN, False),
        (DeviceFingerprint(ip_address="192.0.2.1"), KNOWN, False),
        # current unknown or partial
        (KNOWN, DeviceFingerprint(), False),
        (KNOWN, DeviceFingerprint(user_agent="other"), False),
        (KNOWN, DeviceFingerprint(ip_address="192.0.2.1"), False),
        # neither
        (DeviceFingerprint(), DeviceFingerprint(), False),
    ],
)
def test_fingerprints_conflict(stored, current, conflict):
    assert fingerprints_conflict(stored, current) is conflict


def test_unknown_fingerprint():
    assert DeviceFingerprint.unknown() == DeviceFingerprint(None, None)


def test_as_metadata():
    assert KNOWN.as_metadata("original") == {
        "originalUserAgent": "Mozilla/5.0",
        "originalIP": "203.0.113.10",
    }
    assert DeviceFingerprint().as_metadata("suspicious") == {
        "suspiciousUserAgent": None,
        "suspiciousIP": None,
    }
