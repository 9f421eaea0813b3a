"""
End-to-end deployment against an in-memory chain
Requires the test extra: pip install -e ".[test]"
"""

import pytest
from unittest.mock import Mock

pytest.importorskip("eth_tester")

from web3 import Web3, EthereumTesterProvider
from eth_account import Account

from deployer.blockchain.artifact_store import ArtifactStore
from deployer.blockchain.deployment_client import DeploymentClient
from deployer.orchestrator import DeploymentOrchestrator, Deployed, Failed
from deployer.wallet_manager import WalletManager


@pytest.fixture
def w3():
    return Web3(EthereumTesterProvider())


@pytest.fixture
def rpc_manager(w3):
    rpc_manager = Mock()
    rpc_manager.get_web3.return_value = w3
    rpc_manager.ensure_connected.return_value = w3
    return rpc_manager


@pytest.fixture
def artifacts_dir(write_artifact):
    return str(write_artifact(abi=[]))


def make_orchestrator(artifacts_dir, rpc_manager, wallet_manager, config, lines):
    network = DeploymentClient(rpc_manager, wallet_manager, config)
    return DeploymentOrchestrator(ArtifactStore(artifacts_dir), network, 'DAOVoting', emit=lines.append)


class TestEndToEndDeployment:

    @pytest.mark.asyncio
    async def test_node_account_deployment(self, w3, rpc_manager, artifacts_dir, config):
        lines = []
        orchestrator = make_orchestrator(artifacts_dir, rpc_manager, WalletManager(None), config, lines)

        result = await orchestrator.run()

        assert isinstance(result, Deployed)
        assert lines[-1] == f"DAOVoting deployed to: {result.address}"
        assert w3.eth.get_code(result.address) == b'\x00'

        receipt = w3.eth.get_transaction_receipt(result.tx_hash)
        assert receipt['contractAddress'] == result.address

    @pytest.mark.asyncio
    async def test_locally_signed_deployment(self, w3, rpc_manager, artifacts_dir, config):
        deployer = Account.create()
        tx_hash = w3.eth.send_transaction({
            'from': w3.eth.accounts[0],
            'to': deployer.address,
            'value': Web3.to_wei(1, 'ether')
        })
        w3.eth.wait_for_transaction_receipt(tx_hash)

        lines = []
        orchestrator = make_orchestrator(artifacts_dir, rpc_manager, WalletManager(deployer.key), config, lines)

        result = await orchestrator.run()

        assert isinstance(result, Deployed)
        assert w3.eth.get_transaction(result.tx_hash)['from'] == deployer.address

    @pytest.mark.asyncio
    async def test_two_runs_two_contracts(self, rpc_manager, artifacts_dir, config):
        first = await make_orchestrator(artifacts_dir, rpc_manager, WalletManager(None), config, []).run()
        second = await make_orchestrator(artifacts_dir, rpc_manager, WalletManager(None), config, []).run()

        assert first.address != second.address

    @pytest.mark.asyncio
    async def test_unfunded_key_is_rejected(self, w3, rpc_manager, artifacts_dir, config):
        lines = []
        orchestrator = make_orchestrator(
            artifacts_dir, rpc_manager, WalletManager(Account.create().key), config, lines
        )

        result = await orchestrator.run()

        assert isinstance(result, Failed)
        assert result.stage == 'submit'
        assert len(lines) == 1
