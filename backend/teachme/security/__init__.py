"""Authentication and session-security core.

Modules, leaves first:

- ``fingerprint``  device fingerprint type and the consistency check
- ``events``       append-only security-event sink
- ``ledger``       hashed refresh-token rows
- ``credentials``  account registration, password verification and mutation
- ``issuer``       access/refresh token minting
- ``rotation``     the refresh state machine
- ``sessions``     logout and revoke-all
"""
