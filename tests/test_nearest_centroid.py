"""
Tests for nearest centroid deployment.
"""

import pytest

from ledgerml.deployment import DeployOptions, Severity
from ledgerml.deployment.strategies import NearestCentroidStrategy
from ledgerml.encoding import encode_vector
from ledgerml.errors import OperationRejected, PreconditionViolation
from ledgerml.models import CentroidInfo, NearestCentroidModel

from conftest import ACCOUNT, CONTRACT_ADDRESS


def _model(dims=(1200, 1200, 1200), model_type="nearest centroid classifier"):
    return NearestCentroidModel(
        type=model_type,
        centroids={
            f"class{i}": CentroidInfo(centroid=[0.001 * j for j in range(d)], data_count=i + 1)
            for i, d in enumerate(dims)
        },
    )


class TestNearestCentroidPlan:
    """Tests for NearestCentroidStrategy.plan."""

    def test_layout(self):
        """Three classes of 1200 dimensions: 1 + 2 + 3 * 2 writes."""
        model = _model()
        plan = NearestCentroidStrategy().plan(model)
        encoded = encode_vector(model.centroids["class0"].centroid)

        assert len(plan) == 9
        assert plan.genesis.args == [["class0"], [encoded[:500]], [1]]
        assert [w.args[1:] for w in plan.registrations] == [["class1", 2], ["class2", 3]]
        assert [(w.label, str(w.chunk)) for w in plan.extensions] == [
            ("class0", "[500,1000)"), ("class0", "[1000,1200)"),
            ("class1", "[500,1000)"), ("class1", "[1000,1200)"),
            ("class2", "[500,1000)"), ("class2", "[1000,1200)"),
        ]
        assert plan.extensions[1].args == [encoded[1000:1200], 0]

    def test_dimension_mismatch(self):
        """All centroids must share one dimensionality."""
        with pytest.raises(PreconditionViolation, match="Expected: 1200"):
            NearestCentroidStrategy().plan(_model(dims=(1200, 1199)))

    def test_no_classes(self):
        with pytest.raises(PreconditionViolation):
            NearestCentroidStrategy().plan(NearestCentroidModel(centroids={}))


class TestNearestCentroidDeploy:
    """End-to-end nearest centroid deployments."""

    @pytest.mark.asyncio
    async def test_dimension_mismatch_sends_nothing(self, deployer, ledger, hooks):
        """Validation happens before any write."""
        with pytest.raises(PreconditionViolation):
            await deployer.deploy_model(_model(dims=(3, 4)), DeployOptions(ACCOUNT, hooks=hooks))

        assert ledger.calls == []
        assert hooks.notifications == []

    @pytest.mark.asyncio
    async def test_registrations_run_concurrently(self, deployer, ledger, hooks):
        """Class registrations are in flight together."""
        deployed = await deployer.deploy_model(
            _model(dims=(10,) * 4), DeployOptions(ACCOUNT, hooks=hooks)
        )

        assert deployed.operations == 4
        assert ledger.methods() == ["constructor", "addClass", "addClass", "addClass"]
        assert ledger.max_in_flight == 3

    @pytest.mark.asyncio
    async def test_sparse_uses_sparse_contract(self, deployer, hooks):
        deployed = await deployer.deploy_model(
            _model(dims=(10, 10), model_type="sparse nearest centroid classifier"),
            DeployOptions(ACCOUNT, hooks=hooks),
        )

        assert deployed.contract.artifact.name == "SparseNearestCentroidClassifier"

    @pytest.mark.asyncio
    async def test_registration_failure(self, deployer, ledger, hooks):
        """One failed registration fails the deployment after the address is saved."""
        cause = ledger.fail("addClass", when=lambda call: call.args[1] == "class2")

        with pytest.raises(OperationRejected) as exc_info:
            await deployer.deploy_model(_model(), DeployOptions(ACCOUNT, hooks=hooks))

        assert exc_info.value.cause is cause
        assert hooks.addresses == [("model", CONTRACT_ADDRESS)]
        address_at = hooks.events.index(("address", "model", CONTRACT_ADDRESS))
        error_at = hooks.events.index(("notify", 'Error creating the "class2" class', Severity.ERROR))
        assert address_at < error_at

        # Siblings settled, no uploads started
        assert "extendCentroid" not in ledger.methods()
        assert [c.args[1] for c in ledger.confirmed if c.method == "addClass"] == ["class1"]
        assert sorted(hooks.dismissed) == hooks.prompts()
