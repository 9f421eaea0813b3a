"""
RPC Manager
Owns the single JSON-RPC connection used for a deployment
"""

from typing import Dict, Optional
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware
from loguru import logger


class RPCManager:
    """
    One endpoint, created lazily, no fallback tiers

    The connection is not opened until the first stage that needs the
    network, so artifact resolution never touches the node.
    """

    def __init__(self, rpc_url: str, poa: bool = False, request_timeout: float = 30):
        """
        Initialize RPC Manager

        Args:
            rpc_url: HTTP JSON-RPC endpoint
            poa: Inject the proof-of-authority extra-data middleware
            request_timeout: Per-request HTTP timeout in seconds
        """
        self.rpc_url = rpc_url
        self.poa = poa
        self.request_timeout = request_timeout

        self._w3: Optional[Web3] = None

    def get_web3(self) -> Web3:
        """Get (and create on first use) the Web3 instance"""
        if self._w3 is None:
            w3 = Web3(Web3.HTTPProvider(
                self.rpc_url,
                request_kwargs={'timeout': self.request_timeout}
            ))

            if self.poa:
                w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

            self._w3 = w3
            logger.debug(f"Web3 provider created for {self.rpc_url}")

        return self._w3

    def ensure_connected(self) -> Web3:
        """
        Get a Web3 instance that answered a connectivity check

        Returns:
            Connected Web3 instance
        """
        w3 = self.get_web3()

        if not w3.is_connected():
            raise ConnectionError(f"Cannot connect to RPC endpoint {self.rpc_url}")

        logger.info(f"Connected to {self.rpc_url}")
        return w3

    def is_healthy(self) -> bool:
        try:
            return self.get_web3().is_connected()
        except Exception:
            return False

    @classmethod
    def from_config(cls, config: Dict) -> "RPCManager":
        network = config['network']
        return cls(
            rpc_url=network['rpc_url'],
            poa=network.get('poa', False),
            request_timeout=network.get('request_timeout_seconds', 30)
        )
