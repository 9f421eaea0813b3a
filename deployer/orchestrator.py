"""
Deployment Orchestrator
Resolves a compiled artifact, submits one contract creation, waits for
inclusion and reports the resulting address
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Union
from loguru import logger

from .errors import (
    DeploymentError,
    ArtifactResolutionError,
    SubmissionError,
    ConfirmationError,
    AddressResolutionError,
)


class ArtifactResolver(Protocol):
    """Resolves a compiled contract by name"""

    def resolve(self, name: str) -> Any:
        ...


class NetworkClient(Protocol):
    """Submits a creation transaction and follows it to an address"""

    async def submit_deployment(self, artifact: Any, constructor_args: List) -> Any:
        ...

    async def wait_for_inclusion(self, tx_hash: Any) -> Dict:
        ...

    async def get_contract_address(self, receipt: Dict) -> str:
        ...


class DeploymentState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


# Forward-only; FAILED is handled separately
_NEXT_STATE = {
    DeploymentState.IDLE: DeploymentState.RESOLVING,
    DeploymentState.RESOLVING: DeploymentState.SUBMITTING,
    DeploymentState.SUBMITTING: DeploymentState.AWAITING_CONFIRMATION,
    DeploymentState.AWAITING_CONFIRMATION: DeploymentState.REPORTING,
    DeploymentState.REPORTING: DeploymentState.DONE,
}


@dataclass(frozen=True)
class Resolved:
    artifact: Any


@dataclass(frozen=True)
class Submitted:
    artifact: Any
    tx_hash: Any


@dataclass(frozen=True)
class Confirmed:
    artifact: Any
    tx_hash: Any
    receipt: Dict


@dataclass(frozen=True)
class Deployed:
    contract_name: str
    address: str
    tx_hash: Any


@dataclass(frozen=True)
class Failed:
    stage: str
    error: DeploymentError


DeploymentResult = Union[Resolved, Submitted, Confirmed, Deployed, Failed]


class DeploymentOrchestrator:
    """
    Single-shot deployment run

    Each stage either hands a tagged result to the next one or ends the run
    in FAILED. Nothing is retried and nothing is rolled back: a creation
    transaction that reached the network stays there even if a later stage
    fails locally.
    """

    def __init__(
        self,
        resolver: ArtifactResolver,
        network: NetworkClient,
        contract_name: str,
        constructor_args: Optional[List] = None,
        emit: Callable[[str], None] = print
    ):
        """
        Initialize Deployment Orchestrator

        Args:
            resolver: Resolves compiled artifacts by name
            network: Connection used to submit and follow the transaction
            contract_name: Name of the compiled contract to deploy
            constructor_args: Arguments passed to the contract constructor
            emit: Writes one report line to standard output
        """
        self.resolver = resolver
        self.network = network
        self.contract_name = contract_name
        self.constructor_args = list(constructor_args or [])
        self.emit = emit

        self.state = DeploymentState.IDLE
        self.history = [DeploymentState.IDLE]

    def _advance(self):
        """Move to the next state in the sequence"""
        if self.state not in _NEXT_STATE:
            raise RuntimeError(f"Cannot advance from terminal state {self.state.value}")

        self.state = _NEXT_STATE[self.state]
        self.history.append(self.state)
        logger.debug(f"Deployment state: {self.state.value}")

    def _fail(self, error: DeploymentError) -> Failed:
        """Enter the absorbing FAILED state"""
        if self.state in (DeploymentState.DONE, DeploymentState.FAILED):
            raise RuntimeError(f"Cannot fail from terminal state {self.state.value}")

        logger.error(f"Deployment failed while {self.state.value}: {error}")
        self.state = DeploymentState.FAILED
        self.history.append(self.state)
        return Failed(stage=error.stage, error=error)

    def resolve(self) -> Resolved:
        try:
            artifact = self.resolver.resolve(self.contract_name)
        except ArtifactResolutionError:
            raise
        except Exception as e:
            raise ArtifactResolutionError(
                f"Could not resolve artifact {self.contract_name}: {e}"
            ) from e

        if artifact is None:
            raise ArtifactResolutionError(f"Artifact {self.contract_name} not found")

        return Resolved(artifact=artifact)

    async def submit(self, resolved: Resolved) -> Submitted:
        try:
            tx_hash = await self.network.submit_deployment(
                resolved.artifact,
                self.constructor_args
            )
        except SubmissionError:
            raise
        except Exception as e:
            raise SubmissionError(f"Deployment transaction rejected: {e}") from e

        return Submitted(artifact=resolved.artifact, tx_hash=tx_hash)

    async def confirm(self, submitted: Submitted) -> Confirmed:
        try:
            receipt = await self.network.wait_for_inclusion(submitted.tx_hash)
        except ConfirmationError:
            raise
        except Exception as e:
            raise ConfirmationError(f"Lost track of deployment transaction: {e}") from e

        return Confirmed(
            artifact=submitted.artifact,
            tx_hash=submitted.tx_hash,
            receipt=receipt
        )

    async def locate(self, confirmed: Confirmed) -> Deployed:
        try:
            address = await self.network.get_contract_address(confirmed.receipt)
        except AddressResolutionError:
            raise
        except Exception as e:
            raise AddressResolutionError(f"Could not read contract address: {e}") from e

        if not address:
            # Inclusion is supposed to imply a known address
            raise AddressResolutionError("Receipt confirmed but carries no contract address")

        return Deployed(
            contract_name=self.contract_name,
            address=address,
            tx_hash=confirmed.tx_hash
        )

    async def run(self) -> Union[Deployed, Failed]:
        """
        Run the whole deployment once

        Returns:
            Deployed on success, Failed with the stage error otherwise
        """
        if self.state != DeploymentState.IDLE:
            raise RuntimeError("Deployment orchestrator can only run once")

        self.emit(f"Deploying {self.contract_name} contract...")

        try:
            self._advance()
            resolved = self.resolve()
            logger.info(f"Resolved artifact {self.contract_name}")

            self._advance()
            submitted = await self.submit(resolved)

            self._advance()
            confirmed = await self.confirm(submitted)

            self._advance()
            deployed = await self.locate(confirmed)

        except DeploymentError as e:
            return self._fail(e)

        self.emit(f"{deployed.contract_name} deployed to: {deployed.address}")
        self._advance()

        logger.success(f"✅ {deployed.contract_name} deployed at {deployed.address}")
        return deployed
