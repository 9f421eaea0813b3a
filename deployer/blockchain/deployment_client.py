"""
Deployment Client
Submits the creation transaction and follows it to the contract address
"""

import asyncio
from typing import Dict, List, Optional
from web3 import Web3
from web3.exceptions import TransactionNotFound
from loguru import logger

from deployer.errors import SubmissionError, ConfirmationError, AddressResolutionError
from deployer.utils.rpc_manager import RPCManager
from deployer.utils.gas_calculator import GasCalculator
from .transaction_builder import TransactionBuilder


class DeploymentClient:
    """
    web3.py implementation of the orchestrator's network capability
    """

    def __init__(self, rpc_manager: RPCManager, wallet_manager, config: Dict):
        """
        Initialize Deployment Client

        Args:
            rpc_manager: Source of the Web3 connection
            wallet_manager: Deployer account and signer
            config: Deployment configuration
        """
        self.rpc_manager = rpc_manager
        self.wallet_manager = wallet_manager
        self.config = config

        self.poll_interval = config['confirmation']['poll_interval_seconds']

    @property
    def w3(self) -> Web3:
        return self.rpc_manager.get_web3()

    async def submit_deployment(self, artifact, constructor_args: List) -> bytes:
        """
        Build, fund-check and send the deployment transaction

        Args:
            artifact: ContractArtifact to deploy
            constructor_args: Constructor arguments

        Returns:
            Transaction hash
        """
        w3 = self.rpc_manager.ensure_connected()

        sender = self.wallet_manager.get_sender(w3)
        logger.info(f"Deploying from: {sender}")

        builder = TransactionBuilder(w3, self.config)
        transaction = builder.build_deployment_tx(artifact, constructor_args, sender)

        balance = w3.eth.get_balance(sender)
        cost = GasCalculator.max_cost(transaction)

        logger.info(f"Account balance: {w3.from_wei(balance, 'ether')}")
        logger.info(f"Maximum deployment cost: {w3.from_wei(cost, 'ether')}")

        if balance < cost:
            raise SubmissionError(
                f"Insufficient funds in {sender}: balance {balance} wei, "
                f"deployment may cost up to {cost} wei"
            )

        if self.wallet_manager.is_local_signer:
            logger.info("Signing transaction...")
            signed_tx = self.wallet_manager.sign_transaction(transaction)

            logger.info("Sending deployment transaction...")
            tx_hash = w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        else:
            logger.info("Sending deployment transaction through node account...")
            tx_hash = w3.eth.send_transaction(transaction)

        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
        return tx_hash

    async def wait_for_inclusion(self, tx_hash: bytes) -> Dict:
        """
        Wait until the transaction is included, without a local timeout

        Args:
            tx_hash: Hash returned by submit_deployment

        Returns:
            Transaction receipt
        """
        logger.info("Waiting for confirmation...")

        polls = 0
        receipt: Optional[Dict] = None

        while receipt is None:
            try:
                receipt = self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                polls += 1
                if polls % 60 == 0:
                    logger.info(f"Still waiting for {Web3.to_hex(tx_hash)} ({polls} polls)")
                await asyncio.sleep(self.poll_interval)

        if receipt['status'] != 1:
            raise ConfirmationError(
                f"Deployment transaction {Web3.to_hex(tx_hash)} reverted "
                f"in block {receipt.get('blockNumber')}"
            )

        logger.info(f"Included in block {receipt.get('blockNumber')}, gas used: {receipt.get('gasUsed')}")
        return receipt

    async def get_contract_address(self, receipt: Dict) -> str:
        """
        Read the created contract's address and check code exists there

        Args:
            receipt: Receipt of the included creation transaction

        Returns:
            Checksummed contract address
        """
        contract_address = receipt.get('contractAddress')

        if not contract_address:
            raise AddressResolutionError("Receipt has no contractAddress")

        address = Web3.to_checksum_address(contract_address)
        code = self.w3.eth.get_code(address)

        if len(code) == 0:
            raise AddressResolutionError(f"No contract code at {address}")

        return address
