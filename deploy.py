"""
DAOVoting Deployment - Main Entry Point
Deploys the compiled DAOVoting contract and prints its address
"""

import asyncio
import os
import sys
from typing import Dict, Optional
from loguru import logger

from deployer.blockchain.artifact_store import ArtifactStore
from deployer.blockchain.deployment_client import DeploymentClient
from deployer.config import load_config
from deployer.errors import DeploymentError
from deployer.orchestrator import DeploymentOrchestrator, Deployed
from deployer.wallet_manager import WalletManager
from deployer.utils.rpc_manager import RPCManager


def configure_logging(log_dir: str = "data/logs"):
    """Send logs to stderr and a rotating file; stdout stays for the report"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="INFO"
    )

    os.makedirs(log_dir, exist_ok=True)
    logger.add(
        os.path.join(log_dir, "deploy.log"),
        rotation="1 day",
        retention="7 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="DEBUG"
    )


def build_orchestrator(config: Dict) -> DeploymentOrchestrator:
    """Wire the artifact store and web3 client into an orchestrator"""
    resolver = ArtifactStore(config['artifacts_dir'])

    rpc_manager = RPCManager.from_config(config)
    wallet_manager = WalletManager(config.get('deployer_private_key'))
    network = DeploymentClient(rpc_manager, wallet_manager, config)

    return DeploymentOrchestrator(
        resolver=resolver,
        network=network,
        contract_name=config['contract_name'],
        constructor_args=config['constructor_args']
    )


async def main(config: Optional[Dict] = None) -> int:
    """
    Run one deployment

    Args:
        config: Deployment configuration (None = load from file and env)

    Returns:
        Process exit code
    """
    try:
        if config is None:
            config = load_config()
        orchestrator = build_orchestrator(config)
    except DeploymentError as e:
        print(e, file=sys.stderr)
        return e.exit_code

    result = await orchestrator.run()

    if isinstance(result, Deployed):
        return 0

    print(result.error, file=sys.stderr)
    return result.error.exit_code


def cli():
    configure_logging()

    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        exit_code = 130
    except Exception as e:
        logger.opt(exception=e).error(f"Fatal error: {e}")
        print(repr(e), file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
