"""
Tests for the model deployer entry point.
"""

import pytest

from ledgerml.deployment import (
    ArtifactRegistry,
    CallbackHooks,
    DeployOptions,
    DeploymentHooks,
    ModelDeployer,
    Severity,
    plan_deployment,
)
from ledgerml.errors import OperationRejected, PreconditionViolation, UnrecognizedModelType
from ledgerml.models import NaiveBayesModel, PerceptronModel

from conftest import ACCOUNT, CONTRACT_ADDRESS, FakeLedger


def _naive_bayes(num_features=500):
    return NaiveBayesModel(
        classifications=["a", "b"],
        class_counts=[1, 2],
        feature_counts=[list(range(num_features)), list(range(num_features))],
        total_num_features=num_features,
    )


class TestDeployOptions:
    """Tests for option defaults."""

    def test_defaults_filled(self):
        options = DeployOptions(ACCOUNT).with_defaults()

        assert options.to_float == 1e9
        assert isinstance(options.hooks, DeploymentHooks)

    def test_explicit_values_kept(self):
        hooks = DeploymentHooks()
        options = DeployOptions(ACCOUNT, to_float=10.0, hooks=hooks).with_defaults()

        assert options.to_float == 10.0
        assert options.hooks is hooks

    def test_callback_hooks_partial(self):
        """Unset callables are no-ops."""
        seen = []
        hooks = CallbackHooks(notify=lambda message, severity: seen.append(message) or 7)

        assert hooks.notify("hello") == 7
        hooks.dismiss_notification(7)
        hooks.save_address("model", "0x1")
        hooks.save_transaction_hash("model", "0x2")
        assert seen == ["hello"]


class TestModelDeployer:
    """Tests for ModelDeployer.deploy_model."""

    @pytest.mark.asyncio
    async def test_no_hooks(self, deployer, ledger):
        """Deployment works with default no-op hooks."""
        deployed = await deployer.deploy_model(_naive_bayes(), DeployOptions(ACCOUNT))

        assert deployed.address == CONTRACT_ADDRESS
        assert deployed.operations == 4
        assert deployed.gas_used == 400
        assert all(c.sender == ACCOUNT for c in ledger.calls)
        assert all(c.gas == deployer.gas_limit == 8_900_000 for c in ledger.calls)

    @pytest.mark.asyncio
    async def test_dict_model(self, deployer, ledger):
        """Exported JSON dicts are accepted directly."""
        await deployer.deploy_model(
            {
                "type": "Perceptron",
                "classifications": ["a", "b"],
                "weights": [0.1, 0.2],
                "intercept": 0,
            },
            DeployOptions(ACCOUNT),
        )

        assert ledger.methods() == ["constructor"]

    @pytest.mark.asyncio
    async def test_hash_and_address_saved(self, deployer, hooks):
        """The genesis hash and address are recorded; success is announced."""
        deployed = await deployer.deploy_model(_naive_bayes(), DeployOptions(ACCOUNT, hooks=hooks))

        assert hooks.hashes == [("model", deployed.transaction_hash)]
        assert hooks.addresses == [("model", CONTRACT_ADDRESS)]
        assert hooks.notifications[-1] == (
            f"The model contract has been deployed to {CONTRACT_ADDRESS}", Severity.SUCCESS,
        )
        assert sorted(hooks.dismissed) == hooks.prompts()

    @pytest.mark.asyncio
    async def test_genesis_failure(self, deployer, ledger, hooks):
        """Nothing follows a failed genesis; the ledger's cause is surfaced."""
        cause = ledger.fail("constructor", before_submit=True)

        with pytest.raises(OperationRejected) as exc_info:
            await deployer.deploy_model(_naive_bayes(), DeployOptions(ACCOUNT, hooks=hooks))

        assert exc_info.value.cause is cause
        assert ledger.methods() == ["constructor"]
        assert hooks.addresses == []
        assert hooks.hashes == []
        assert hooks.errors() == ["Error deploying the model"]

    @pytest.mark.asyncio
    async def test_missing_contract_address(self, artifacts, hooks):
        """A genesis receipt without an address fails the deployment."""
        ledger = FakeLedger(contract_address=None)
        deployer = ModelDeployer(ledger, artifacts)

        with pytest.raises(OperationRejected):
            await deployer.deploy_model(_naive_bayes(), DeployOptions(ACCOUNT, hooks=hooks))

        assert ledger.methods() == ["constructor"]
        assert hooks.addresses == []

    @pytest.mark.asyncio
    async def test_unknown_type(self, deployer, ledger):
        model = PerceptronModel(type="kernel perceptron", classifications=["a"], weights=[1.0], intercept=0)

        with pytest.raises(UnrecognizedModelType):
            await deployer.deploy_model(model, DeployOptions(ACCOUNT))

        assert ledger.calls == []

    @pytest.mark.asyncio
    async def test_shape_mismatch(self, deployer, ledger):
        """A tag naming another family is a precondition violation."""
        model = _naive_bayes()
        model.type = "perceptron"

        with pytest.raises(PreconditionViolation):
            await deployer.deploy_model(model, DeployOptions(ACCOUNT))

        assert ledger.calls == []

    @pytest.mark.asyncio
    async def test_missing_artifact(self, ledger):
        """No contract for the type means no deployment."""
        deployer = ModelDeployer(ledger, ArtifactRegistry())

        with pytest.raises(UnrecognizedModelType):
            await deployer.deploy_model(_naive_bayes(), DeployOptions(ACCOUNT))

        assert ledger.calls == []


class TestPlanDeployment:
    """Tests for plan_deployment."""

    def test_matches_deployment(self):
        plan = plan_deployment(_naive_bayes())

        assert [w.method for w in plan] == ["constructor", "addClass", "initializeCounts", "initializeCounts"]

    def test_deployer_plan(self, deployer):
        assert len(deployer.plan(_naive_bayes(num_features=100))) == 2
