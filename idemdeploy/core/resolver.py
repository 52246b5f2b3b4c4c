"""Address resolver, the core's only door to the deployment oracle.

Holds no state besides the injected oracle. Every oracle failure, and
every malformed answer, is surfaced as ``OracleFault`` so that callers see
one error kind for the whole external boundary.
"""

from __future__ import annotations

import logging

from idemdeploy.core.errors import InvalidInputError, OracleFault
from idemdeploy.core.hasher import SALT_SIZE, is_address, normalize_address
from idemdeploy.oracle.base import DeploymentOracle

logger = logging.getLogger(__name__)


class AddressResolver:
    """Wraps a ``DeploymentOracle`` with validation and fault mapping.

    Parameters
    ----------
    oracle:
        Any object satisfying the ``DeploymentOracle`` protocol.
    """

    def __init__(self, oracle: DeploymentOracle) -> None:
        self._oracle = oracle

    @property
    def oracle(self) -> DeploymentOracle:
        return self._oracle

    def resolve_address(self, salt: bytes, payload: bytes) -> str:
        """Deterministic target address for ``(salt, payload)``."""
        _check_salt(salt)
        try:
            address = self._oracle.compute_deterministic_address(salt, payload)
        except Exception as exc:
            raise OracleFault(f"Address computation failed: {exc}") from exc
        return _checked_address(address, "compute_deterministic_address")

    def is_occupied(self, address: str) -> bool:
        """Whether an artifact already exists at *address*."""
        try:
            occupied = self._oracle.has_been_deployed(address)
        except Exception as exc:
            raise OracleFault(f"Occupancy check failed for {address}: {exc}") from exc
        if not isinstance(occupied, bool):
            raise OracleFault(
                f"has_been_deployed returned {type(occupied).__name__}, expected bool"
            )
        logger.debug("Occupancy of %s: %s", address, occupied)
        return occupied

    def deploy(self, salt: bytes, payload: bytes, value: int = 0) -> str:
        """Submit the deployment and return the address the oracle reports."""
        _check_salt(salt)
        try:
            address = self._oracle.deploy(salt, payload, value)
        except Exception as exc:
            raise OracleFault(f"Deployment failed: {exc}") from exc
        return _checked_address(address, "deploy")


def _check_salt(salt: bytes) -> None:
    if len(salt) != SALT_SIZE:
        raise InvalidInputError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")


def _checked_address(address: object, operation: str) -> str:
    if not is_address(address):
        raise OracleFault(f"Oracle {operation} returned a malformed address: {address!r}")
    return normalize_address(address)
