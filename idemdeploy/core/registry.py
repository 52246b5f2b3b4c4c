"""Registry of pending artifacts: insertion-ordered, write-once per field.

Design:
- Names are unique (case- and byte-exact) for the registry's lifetime.
- Registration order is preserved and drives batch and report order.
- Fingerprint and address are computed once at registration and never
  change afterwards.
- Status changes only through ``mark()``, validated against
  ``VALID_TRANSITIONS``.
- There is no delete.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from idemdeploy.core.errors import (
    DuplicateNameError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
)
from idemdeploy.core.hasher import ZERO_SALT, compute_fingerprint, full_payload
from idemdeploy.core.resolver import AddressResolver
from idemdeploy.models.deployment import VALID_TRANSITIONS, Deployment, DeploymentStatus

logger = logging.getLogger(__name__)


class Registry:
    """Ordered, name-keyed collection of ``Deployment`` records.

    Parameters
    ----------
    resolver:
        Resolver used to compute each artifact's deterministic address at
        registration time.
    """

    def __init__(self, resolver: AddressResolver) -> None:
        self._resolver = resolver
        self._order: list[str] = []
        self._records: dict[str, Deployment] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        init_payload: bytes,
        *,
        salt: bytes = ZERO_SALT,
        constructor_args: bytes = b"",
        value: int = 0,
    ) -> str:
        """Register an artifact and return its deterministic address.

        Raises ``DuplicateNameError`` if *name* is already registered and
        ``InvalidInputError`` for a malformed salt or a negative value. The
        registry is unchanged when registration fails for any reason.
        """
        if name in self._records:
            raise DuplicateNameError(name)
        if value < 0:
            raise InvalidInputError(f"Value of {name!r} must be non-negative, got {value}")

        fingerprint = compute_fingerprint(init_payload, constructor_args)
        address = self._resolver.resolve_address(
            salt, full_payload(init_payload, constructor_args)
        )
        record = Deployment(
            name=name,
            salt=salt,
            init_payload=init_payload,
            constructor_args=constructor_args,
            value=value,
            fingerprint=fingerprint,
            deployment_address=address,
        )

        self._records[name] = record
        self._order.append(name)
        logger.debug("Registered %r at %s", name, address)
        return address

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Deployment:
        """Return the record for *name*.

        Records are frozen, so the returned value cannot be used to mutate
        registry state.
        """
        try:
            return self._records[name]
        except KeyError:
            raise NotFoundError(name) from None

    def names(self) -> list[str]:
        """Names in registration order."""
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[Deployment]:
        return (self._records[n] for n in self._order)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def mark(self, name: str, status: DeploymentStatus) -> Deployment:
        """Apply a status transition and return the updated record.

        Only the status changes; identity fields stay as registered.
        """
        current = self.lookup(name)
        allowed = VALID_TRANSITIONS.get(current.status, set())
        if status not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition {name!r} from {current.status.value} to {status.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )

        updated = current.model_copy(update={"status": status})
        self._records[name] = updated
        logger.debug(
            "Status of %r: %s -> %s", name, current.status.value, status.value
        )
        return updated
