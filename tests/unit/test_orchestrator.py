"""Unit tests for the Orchestrator.

Covers the deploy state machine, idempotent re-runs, oracle faults, and
the read-only query helpers.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from idemdeploy.core.errors import DuplicateNameError, NotFoundError, OracleFault
from idemdeploy.core.hasher import ZERO_SALT, normalize_salt
from idemdeploy.core.orchestrator import Orchestrator
from idemdeploy.models.deployment import DeploymentStatus
from idemdeploy.oracle.memory import InMemoryOracle


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _CountingOracle(InMemoryOracle):
    """In-memory oracle that counts occupancy checks."""

    def __init__(self, deployer: str) -> None:
        super().__init__(deployer)
        self.checks: list[str] = []

    def has_been_deployed(self, address: str) -> bool:
        self.checks.append(address)
        return super().has_been_deployed(address)


class _FailingDeployOracle(InMemoryOracle):
    """Deploys normally until ``fail_on`` deploys have happened."""

    def __init__(self, deployer: str, fail_on: int) -> None:
        super().__init__(deployer)
        self.fail_on = fail_on

    def deploy(self, salt: bytes, payload: bytes, value: int = 0) -> str:
        if len(self.calls) >= self.fail_on:
            raise TimeoutError("submission timed out")
        return super().deploy(salt, payload, value)


class _MisroutingOracle(InMemoryOracle):
    """Deploys somewhere other than the address it computed."""

    def deploy(self, salt: bytes, payload: bytes, value: int = 0) -> str:
        super().deploy(salt, payload, value)
        return "0x" + "de" * 20


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_fresh_artifact_is_created(self, orchestrator: Orchestrator, oracle: InMemoryOracle, token_code: bytes):
        address = orchestrator.register("Token", token_code)
        assert address == oracle.compute_deterministic_address(ZERO_SALT, token_code)
        assert oracle.has_been_deployed(address) is False

        orchestrator.deploy_all(broadcast=True)

        assert orchestrator.get_deployment("Token").status == DeploymentStatus.CREATED
        assert oracle.has_been_deployed(address) is True

    def test_preexisting_artifact_is_found(self, orchestrator: Orchestrator, oracle: InMemoryOracle, token_code: bytes):
        oracle.seed(oracle.compute_deterministic_address(ZERO_SALT, token_code))
        orchestrator.register("Token", token_code)

        orchestrator.deploy_all(broadcast=True)

        assert orchestrator.get_deployment("Token").status == DeploymentStatus.FOUND
        assert oracle.calls == []

    def test_duplicate_keeps_first_registration(
        self, orchestrator: Orchestrator, token_code: bytes, vault_code: bytes
    ):
        first = orchestrator.register("A", token_code)
        with pytest.raises(DuplicateNameError):
            orchestrator.register("A", vault_code)

        d = orchestrator.get_deployment("A")
        assert d.init_payload == token_code
        assert d.deployment_address == first

    def test_identical_payloads_share_an_address(
        self, orchestrator: Orchestrator, oracle: InMemoryOracle, token_code: bytes
    ):
        a = orchestrator.register("First", token_code)
        b = orchestrator.register("Second", token_code)
        assert a == b

        orchestrator.deploy_all(broadcast=True)

        assert orchestrator.get_deployment("First").status == DeploymentStatus.CREATED
        assert orchestrator.get_deployment("Second").status == DeploymentStatus.FOUND
        assert len(oracle.calls) == 1


# ---------------------------------------------------------------------------
# Idempotency
# ---------------------------------------------------------------------------


class TestIdempotency:
    def test_rerun_finds_everything(
        self,
        oracle: InMemoryOracle,
        make_orchestrator: Callable[..., Orchestrator],
        token_code: bytes,
        vault_code: bytes,
    ):
        for _ in range(2):
            orch = make_orchestrator(oracle)
            orch.register("Token", token_code)
            orch.register("Vault", vault_code, salt=normalize_salt(1))
            orch.deploy_all(broadcast=True)

        statuses = [orch.get_deployment(n).status for n in ("Token", "Vault")]
        assert statuses == [DeploymentStatus.FOUND, DeploymentStatus.FOUND]
        assert not orch.has_any_change()
        assert len(oracle.calls) == 2

    def test_retry_after_fault_resumes(
        self, deployer: str, make_orchestrator: Callable[..., Orchestrator], token_code: bytes, vault_code: bytes
    ):
        oracle = _FailingDeployOracle(deployer, fail_on=1)
        orch = make_orchestrator(oracle)
        orch.register("Token", token_code)
        orch.register("Vault", vault_code)
        with pytest.raises(OracleFault):
            orch.deploy_all(broadcast=True)

        oracle.fail_on = 10
        retry = make_orchestrator(oracle)
        retry.register("Token", token_code)
        retry.register("Vault", vault_code)
        retry.deploy_all(broadcast=True)

        assert retry.get_deployment("Token").status == DeploymentStatus.FOUND
        assert retry.get_deployment("Vault").status == DeploymentStatus.CREATED

    def test_second_pass_in_same_run_does_not_call_oracle(self, deployer: str, make_orchestrator, token_code: bytes):
        oracle = _CountingOracle(deployer)
        orch = make_orchestrator(oracle)
        orch.register("Token", token_code)
        orch.deploy_all(broadcast=True)
        orch.deploy_all(broadcast=True)

        assert len(oracle.checks) == 1
        assert len(oracle.calls) == 1
        assert orch.get_deployment("Token").status == DeploymentStatus.CREATED


# ---------------------------------------------------------------------------
# Broadcast and ordering
# ---------------------------------------------------------------------------


class TestDeployBehaviour:
    def test_dry_run_marks_created_without_deploying(
        self, orchestrator: Orchestrator, oracle: InMemoryOracle, token_code: bytes
    ):
        address = orchestrator.register("Token", token_code)
        orchestrator.deploy_all(broadcast=False)

        assert orchestrator.get_deployment("Token").status == DeploymentStatus.CREATED
        assert orchestrator.has_any_change()
        assert oracle.calls == []
        assert oracle.has_been_deployed(address) is False

    def test_oracle_checked_in_registration_order(self, deployer: str, make_orchestrator, token_code: bytes):
        oracle = _CountingOracle(deployer)
        orch = make_orchestrator(oracle)
        expected = [
            orch.register(name, token_code, salt=normalize_salt(i))
            for i, name in enumerate(["C", "A", "B"])
        ]
        orch.deploy_all(broadcast=True)
        assert oracle.checks == expected
        assert [c.address for c in oracle.calls] == expected

    def test_value_forwarded_to_oracle(self, orchestrator: Orchestrator, oracle: InMemoryOracle, token_code: bytes):
        orchestrator.register("Token", token_code, value=42)
        orchestrator.deploy_all(broadcast=True)
        assert oracle.calls[0].value == 42

    def test_deploy_is_deploy_all(self, orchestrator: Orchestrator, token_code: bytes):
        orchestrator.register("Token", token_code)
        orchestrator.deploy(True)
        assert orchestrator.has_change("Token")

    def test_deploy_by_name_only_touches_one(self, orchestrator: Orchestrator, token_code: bytes, vault_code: bytes):
        orchestrator.register("Token", token_code)
        orchestrator.register("Vault", vault_code)

        result = orchestrator.deploy_by_name("Vault", broadcast=True)

        assert result.status == DeploymentStatus.CREATED
        assert orchestrator.get_deployment("Token").status == DeploymentStatus.UNRESOLVED

    def test_deploy_by_name_unknown(self, orchestrator: Orchestrator):
        with pytest.raises(NotFoundError):
            orchestrator.deploy_by_name("Nope", broadcast=True)

    def test_address_unchanged_by_deploy(self, orchestrator: Orchestrator, token_code: bytes):
        before = orchestrator.register("Token", token_code)
        orchestrator.deploy_all(broadcast=True)
        assert orchestrator.get_address("Token") == before


# ---------------------------------------------------------------------------
# Faults
# ---------------------------------------------------------------------------


class TestFaults:
    def test_first_fault_aborts_batch(self, deployer: str, make_orchestrator, token_code: bytes, vault_code: bytes):
        oracle = _FailingDeployOracle(deployer, fail_on=0)
        orch = make_orchestrator(oracle)
        orch.register("Token", token_code)
        orch.register("Vault", vault_code)

        with pytest.raises(OracleFault):
            orch.deploy_all(broadcast=True)

        assert orch.get_deployment("Token").status == DeploymentStatus.UNRESOLVED
        assert orch.get_deployment("Vault").status == DeploymentStatus.UNRESOLVED

    def test_address_mismatch_is_oracle_fault(self, deployer: str, make_orchestrator, token_code: bytes):
        orch = make_orchestrator(_MisroutingOracle(deployer))
        orch.register("Token", token_code)
        with pytest.raises(OracleFault, match="expected"):
            orch.deploy_all(broadcast=True)
        assert orch.get_deployment("Token").status == DeploymentStatus.UNRESOLVED


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_has_change(self, orchestrator: Orchestrator, oracle: InMemoryOracle, token_code: bytes, vault_code: bytes):
        oracle.seed(oracle.compute_deterministic_address(ZERO_SALT, token_code))
        orchestrator.register("Token", token_code)
        orchestrator.register("Vault", vault_code)

        assert not orchestrator.has_any_change()
        orchestrator.deploy_all(broadcast=True)

        assert orchestrator.has_any_change()
        assert not orchestrator.has_change("Token")
        assert orchestrator.has_change("Vault")

    def test_has_any_change_empty_registry(self, orchestrator: Orchestrator):
        assert orchestrator.has_any_change() is False

    def test_queries_on_unknown_name(self, orchestrator: Orchestrator):
        with pytest.raises(NotFoundError):
            orchestrator.get_address("Nope")
        with pytest.raises(NotFoundError):
            orchestrator.has_change("Nope")

    def test_independent_registries(self, oracle: InMemoryOracle, make_orchestrator, token_code: bytes):
        a = make_orchestrator(oracle)
        b = make_orchestrator(oracle)
        a.register("Token", token_code)
        assert "Token" not in b.registry
        b.register("Token", token_code)
        assert a.get_address("Token") == b.get_address("Token")
