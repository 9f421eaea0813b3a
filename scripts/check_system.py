"""
System Check Script
Verifies configuration, artifact and network before deploying
Never submits a transaction
"""

import sys
from typing import Dict, Optional

from loguru import logger

from deployer.blockchain.artifact_store import ArtifactStore
from deployer.config import load_config
from deployer.errors import DeploymentError
from deployer.wallet_manager import WalletManager
from deployer.utils.rpc_manager import RPCManager


def check_configuration() -> Optional[Dict]:
    """Load configuration, None if invalid"""
    logger.info("Checking configuration...")

    try:
        config = load_config()
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return None

    logger.success(f"  ✓ Contract: {config['contract_name']}")
    logger.success(f"  ✓ RPC: {config['network']['rpc_url']}")
    return config


def check_artifact(config: Dict) -> bool:
    """Check the compiled artifact resolves"""
    logger.info("Checking compiled artifact...")

    try:
        artifact = ArtifactStore(config['artifacts_dir']).resolve(config['contract_name'])
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    expected = len(artifact.constructor_inputs)
    given = len(config['constructor_args'])

    if expected != given:
        logger.error(f"  ✗ Constructor takes {expected} arguments, {given} configured")
        return False

    logger.success(f"  ✓ {artifact.fully_qualified_name}")
    return True


def check_rpc_connection(rpc_manager: RPCManager) -> bool:
    """Check the RPC endpoint answers"""
    logger.info("Checking RPC connection...")

    if not rpc_manager.is_healthy():
        logger.error(f"  ✗ Cannot connect to {rpc_manager.rpc_url}")
        return False

    w3 = rpc_manager.get_web3()
    logger.success(f"  ✓ Connected (chain {w3.eth.chain_id}, block {w3.eth.block_number})")
    return True


def check_deployer_balance(rpc_manager: RPCManager, config: Dict) -> bool:
    """Check the deployer account exists and holds funds"""
    logger.info("Checking deployer balance...")

    try:
        wallet_manager = WalletManager(config.get('deployer_private_key'))
        w3 = rpc_manager.get_web3()
        sender = wallet_manager.get_sender(w3)
        balance = w3.eth.get_balance(sender)
    except Exception as e:
        logger.error(f"  ✗ {e}")
        return False

    if balance == 0:
        logger.error(f"  ✗ {sender} has no funds")
        return False

    logger.success(f"  ✓ {sender}: {w3.from_wei(balance, 'ether')}")
    return True


def main() -> int:
    """Run all system checks"""
    logger.info("=" * 70)
    logger.info("Deployment System Check")
    logger.info("=" * 70)

    config = check_configuration()
    if config is None:
        logger.error("❌ Configuration invalid - fix issues above")
        return 1

    rpc_manager = RPCManager.from_config(config)

    results = [
        ("Compiled Artifact", check_artifact(config)),
        ("RPC Connection", check_rpc_connection(rpc_manager)),
    ]

    # Balance needs a live connection
    if results[-1][1]:
        results.append(("Deployer Balance", check_deployer_balance(rpc_manager, config)))
    else:
        results.append(("Deployer Balance", False))

    logger.info("")
    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    passed = sum(1 for _, result in results if result)
    logger.info(f"Total: {passed}/{len(results)} checks passed")

    if passed == len(results):
        logger.success("✅ Ready to deploy: python deploy.py")
        return 0

    logger.error("❌ Not ready to deploy - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
