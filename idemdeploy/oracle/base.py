"""Deployment oracle protocol and the shared address derivation.

The core never talks to a network directly. It depends on any object that
satisfies ``DeploymentOracle``: compute a deterministic address, report
occupancy, deploy. Real backends (an RPC client bound to an on-chain
factory, say) and the reference backends in this package are
interchangeable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from idemdeploy.core.hasher import (
    ADDRESS_SIZE,
    SALT_SIZE,
    from_hex,
    is_address,
    sha256_digest,
    to_hex,
)


class OracleError(RuntimeError):
    """Raised by reference oracles when a request cannot be honoured."""


class AddressOccupiedError(OracleError):
    """Raised when deploying to an address that already holds an artifact."""


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class DeploymentOracle(Protocol):
    """Protocol for deployment backends.

    Implementations must make ``compute_deterministic_address`` a pure
    function of ``(salt, payload)`` and must return that same address from
    ``deploy``.
    """

    def has_been_deployed(self, address: str) -> bool:
        """Return ``True`` if an artifact already exists at *address*."""
        ...

    def compute_deterministic_address(self, salt: bytes, payload: bytes) -> str:
        """Return the ``0x``-prefixed address *payload* would land at."""
        ...

    def deploy(self, salt: bytes, payload: bytes, value: int = 0) -> str:
        """Deploy *payload* under *salt* and return the resulting address.

        Fails if the target address is already occupied.
        """
        ...


# ---------------------------------------------------------------------------
# Address derivation
# ---------------------------------------------------------------------------


def compute_deterministic_address(deployer: str, salt: bytes, payload: bytes) -> str:
    """Factory-style deterministic address.

    ``sha256(0xff || deployer || salt || sha256(payload))[-20:]``

    The result depends on the deployer, the salt, and the payload content
    only.
    """
    if not is_address(deployer):
        raise OracleError(f"Deployer is not a 20-byte address: {deployer!r}")
    if len(salt) != SALT_SIZE:
        raise OracleError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")
    preimage = b"\xff" + from_hex(deployer) + bytes(salt) + sha256_digest(payload)
    return to_hex(sha256_digest(preimage)[-ADDRESS_SIZE:])
