"""
Gas Calculator
Fee parameters for the deployment transaction
"""

from typing import Dict
from web3 import Web3
from loguru import logger

from deployer.errors import SubmissionError


class GasCalculator:
    """
    Picks EIP-1559 fees on London-enabled chains, legacy gasPrice elsewhere
    """

    def __init__(self, w3: Web3, config: Dict):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            config: Deployment configuration
        """
        self.w3 = w3

        self.max_gas_price_gwei = config['gas_settings']['max_gas_price_gwei']
        self.priority_fee_gwei = config['gas_settings']['priority_fee_gwei']

    def get_fee_params(self) -> Dict[str, int]:
        """
        Get fee fields for a new transaction

        Returns:
            Either maxFeePerGas/maxPriorityFeePerGas or gasPrice, in wei
        """
        latest_block = self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            return {'gasPrice': self.get_legacy_gas_price()}

        return self.get_eip1559_gas_params(base_fee_wei)

    def get_eip1559_gas_params(self, base_fee_wei: int) -> Dict[str, int]:
        """
        Max fee = base fee * 2 + priority fee, capped at max_gas_price_gwei

        Args:
            base_fee_wei: Base fee of the latest block

        Returns:
            Dict with gas parameters in wei
        """
        priority_fee_wei = int(self.w3.to_wei(self.priority_fee_gwei, 'gwei'))
        max_allowed_wei = int(self.w3.to_wei(self.max_gas_price_gwei, 'gwei'))

        max_fee_wei = min(base_fee_wei * 2 + priority_fee_wei, max_allowed_wei)
        priority_fee_wei = min(priority_fee_wei, max_fee_wei)

        if max_fee_wei < base_fee_wei:
            # Never included; the confirmation wait has no timeout
            raise SubmissionError(
                f"Base fee {self.w3.from_wei(base_fee_wei, 'gwei')} gwei is above the "
                f"{self.max_gas_price_gwei} gwei cap, refusing to send"
            )

        logger.debug(f"EIP-1559 fees: max {max_fee_wei} wei, tip {priority_fee_wei} wei")

        return {
            'maxFeePerGas': max_fee_wei,
            'maxPriorityFeePerGas': priority_fee_wei
        }

    def get_legacy_gas_price(self) -> int:
        """
        Network gas price plus a 5% buffer, capped

        Returns:
            Gas price in wei
        """
        gas_price_wei = self.w3.eth.gas_price
        buffered_wei = gas_price_wei * 105 // 100

        max_allowed_wei = int(self.w3.to_wei(self.max_gas_price_gwei, 'gwei'))
        if gas_price_wei > max_allowed_wei:
            raise SubmissionError(
                f"Gas price {self.w3.from_wei(gas_price_wei, 'gwei')} gwei is above the "
                f"{self.max_gas_price_gwei} gwei cap, refusing to send"
            )
        final_wei = min(buffered_wei, max_allowed_wei)

        logger.debug(f"Legacy gas price: {self.w3.from_wei(final_wei, 'gwei')} gwei")
        return final_wei

    @staticmethod
    def max_cost(transaction: Dict) -> int:
        """
        Worst-case cost of a transaction in wei

        Args:
            transaction: Transaction dict with gas and fee fields

        Returns:
            gas * max price + value
        """
        price = transaction.get('maxFeePerGas', transaction.get('gasPrice', 0))
        return transaction['gas'] * price + transaction.get('value', 0)
