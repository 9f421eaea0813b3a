"""
Deployer Core Package
Handles the deployment run, its error taxonomy, configuration and wallet
"""

from .orchestrator import DeploymentOrchestrator, DeploymentState
from .wallet_manager import WalletManager
from .config import load_config

__all__ = ['DeploymentOrchestrator', 'DeploymentState', 'WalletManager', 'load_config']
