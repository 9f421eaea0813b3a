"""
Shared test fixtures
"""

import copy
import json
import pytest

from deployer.config import DEFAULT_CONFIG


# Init code returning a one-byte runtime (STOP)
STUB_BYTECODE = "0x6001600c60003960016000f300"

DAO_VOTING_ABI = [
    {"inputs": [], "stateMutability": "nonpayable", "type": "constructor"},
    {
        "inputs": [{"name": "proposalId", "type": "uint256"}],
        "name": "vote",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]


@pytest.fixture
def config():
    """Default deployment configuration with fast polling"""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg['confirmation']['poll_interval_seconds'] = 0.001
    return cfg


@pytest.fixture
def write_artifact(tmp_path):
    """Write a Hardhat-style artifact under tmp_path/artifacts"""
    root = tmp_path / "artifacts"
    root.mkdir(exist_ok=True)

    def _write(contract_name="DAOVoting", source_name=None, abi=None, bytecode=STUB_BYTECODE):
        source_name = source_name or f"contracts/{contract_name}.sol"
        directory = root / source_name
        directory.mkdir(parents=True, exist_ok=True)

        artifact = {
            "_format": "hh-sol-artifact-1",
            "contractName": contract_name,
            "sourceName": source_name,
            "abi": DAO_VOTING_ABI if abi is None else abi,
            "bytecode": bytecode,
            "deployedBytecode": "0x00",
            "linkReferences": {},
            "deployedLinkReferences": {}
        }
        (directory / f"{contract_name}.json").write_text(json.dumps(artifact))
        (directory / f"{contract_name}.dbg.json").write_text(json.dumps({"buildInfo": "x"}))
        return root

    return _write
