"""
Wallet Manager
Chooses the deployer account and signs the deployment transaction
"""

from typing import Dict, Optional
from web3 import Web3
from eth_account import Account
from loguru import logger

from .errors import ConfigurationError, SubmissionError


class WalletManager:
    """
    Deployer account handling:
    - Local key: transaction is signed here and sent raw
    - No key: the node's first unlocked account signs (dev nodes only)
    """

    def __init__(self, private_key: Optional[str] = None):
        """
        Initialize wallet manager

        Args:
            private_key: Hex-encoded deployer key (None = use node account)
        """
        self.account = None

        if private_key:
            try:
                self.account = Account.from_key(private_key)
            except Exception as e:
                # Never echo the key itself
                raise ConfigurationError(f"DEPLOYER_PRIVATE_KEY is not a valid key: {type(e).__name__}") from e

            logger.info(f"Deployer wallet: {self.account.address}")
        else:
            logger.info("No DEPLOYER_PRIVATE_KEY set, using node-managed account")

    @property
    def is_local_signer(self) -> bool:
        return self.account is not None

    def get_sender(self, w3: Web3) -> str:
        """
        Resolve the address that pays for the deployment

        Args:
            w3: Connected Web3 instance

        Returns:
            Checksummed sender address
        """
        if self.account is not None:
            return self.account.address

        accounts = w3.eth.accounts

        if not accounts:
            raise SubmissionError(
                "No DEPLOYER_PRIVATE_KEY set and the node exposes no unlocked accounts"
            )

        return Web3.to_checksum_address(accounts[0])

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the local deployer key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        if self.account is None:
            raise SubmissionError("Cannot sign locally without DEPLOYER_PRIVATE_KEY")

        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise
