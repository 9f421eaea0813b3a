"""
Blockchain Interaction Package
Handles artifact lookup, transaction building and deployment submission
"""

from .artifact_store import ArtifactStore, ContractArtifact
from .transaction_builder import TransactionBuilder
from .deployment_client import DeploymentClient

__all__ = ['ArtifactStore', 'ContractArtifact', 'TransactionBuilder', 'DeploymentClient']
