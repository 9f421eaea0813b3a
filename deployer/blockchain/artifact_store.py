"""
Artifact Store
Resolves compiled contracts from a Hardhat-style artifacts directory
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, List, Tuple
from loguru import logger

from deployer.errors import ArtifactResolutionError


@dataclass(frozen=True)
class ContractArtifact:
    """Bytecode and ABI of one compiled contract"""

    contract_name: str
    source_name: str
    abi: Tuple
    bytecode: str

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    @property
    def constructor_inputs(self) -> List[Dict]:
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return list(entry.get('inputs', []))
        return []


class ArtifactStore:
    """
    Read-only view of the build output

    Layout: <artifacts_dir>/<sourceName>/<ContractName>.json
    Debug files (*.dbg.json) and build-info/ are ignored.
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Artifact Store

        Args:
            artifacts_dir: Root of the compiled artifacts
        """
        self.artifacts_dir = artifacts_dir

    def _candidates(self, contract_name: str) -> List[str]:
        """Find every artifact file named after the contract"""
        matches = []

        for root, dirs, files in os.walk(self.artifacts_dir):
            dirs[:] = sorted(d for d in dirs if d != 'build-info')

            if f"{contract_name}.json" in files:
                matches.append(os.path.join(root, f"{contract_name}.json"))

        return matches

    def _load(self, path: str) -> ContractArtifact:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactResolutionError(f"Cannot read artifact {path}: {e}") from e

        if not isinstance(data, dict):
            raise ArtifactResolutionError(f"Artifact {path} is not a JSON object")

        missing = [key for key in ('abi', 'bytecode') if key not in data]
        if missing:
            raise ArtifactResolutionError(f"Artifact {path} missing {', '.join(missing)}")

        abi = data['abi']
        if not isinstance(abi, list) or not all(isinstance(entry, dict) for entry in abi):
            raise ArtifactResolutionError(f"Artifact {path} abi must be a list of JSON objects")

        contract_name = data.get('contractName') or os.path.splitext(os.path.basename(path))[0]
        source_name = data.get('sourceName') or os.path.relpath(os.path.dirname(path), self.artifacts_dir)

        bytecode = data['bytecode']
        if isinstance(bytecode, dict):
            # solc standard JSON shape: {"object": "..."}
            bytecode = bytecode.get('object', '')

        if not isinstance(bytecode, str):
            raise ArtifactResolutionError(f"Artifact {path} bytecode must be a hex string")

        if not bytecode or bytecode in ('0x', '0X'):
            raise ArtifactResolutionError(
                f"{contract_name} has no bytecode (abstract contract or interface), cannot deploy"
            )

        if not bytecode.startswith('0x'):
            bytecode = '0x' + bytecode

        return ContractArtifact(
            contract_name=contract_name,
            source_name=source_name,
            abi=tuple(abi),
            bytecode=bytecode
        )

    def resolve(self, name: str) -> ContractArtifact:
        """
        Resolve a compiled contract by name

        Args:
            name: Bare name (DAOVoting) or fully qualified
                  name (contracts/DAOVoting.sol:DAOVoting)

        Returns:
            ContractArtifact
        """
        if not os.path.isdir(self.artifacts_dir):
            raise ArtifactResolutionError(
                f"Artifacts directory {self.artifacts_dir} not found, run 'npx hardhat compile' first"
            )

        if ':' in name:
            source_name, contract_name = name.rsplit(':', 1)
            path = os.path.join(self.artifacts_dir, source_name, f"{contract_name}.json")

            if not os.path.isfile(path):
                raise ArtifactResolutionError(f"Artifact for {name} not found")

            artifact = self._load(path)

        else:
            candidates = self._candidates(name)

            if not candidates:
                raise ArtifactResolutionError(
                    f"Artifact for contract {name} not found in {self.artifacts_dir}"
                )

            if len(candidates) > 1:
                sources = [os.path.relpath(os.path.dirname(p), self.artifacts_dir) for p in candidates]
                raise ArtifactResolutionError(
                    f"Contract name {name} is ambiguous, use a fully qualified name "
                    f"(found in {', '.join(sources)})"
                )

            artifact = self._load(candidates[0])

        logger.debug(f"Artifact {artifact.fully_qualified_name} loaded")
        return artifact
