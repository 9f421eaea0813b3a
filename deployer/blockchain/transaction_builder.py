"""
Transaction Builder
Constructs the contract-creation transaction for a compiled artifact
"""

from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger

from deployer.utils.gas_calculator import GasCalculator


class TransactionBuilder:
    """
    Builds deployment transactions
    """

    def __init__(self, w3: Web3, config: Dict, gas_calculator: Optional[GasCalculator] = None):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            config: Deployment configuration
            gas_calculator: Fee source (default: built from config)
        """
        self.w3 = w3
        self.gas_calculator = gas_calculator or GasCalculator(w3, config)

        self.gas_limit_buffer = config['gas_settings']['gas_limit_buffer']
        self.fixed_gas_limit = config['gas_settings'].get('gas_limit')
        self.chain_id = config['network'].get('chain_id')

    def build_deployment_tx(self, artifact, constructor_args: List, sender: str) -> Dict:
        """
        Build transaction for contract creation

        Args:
            artifact: ContractArtifact to deploy
            constructor_args: Constructor arguments
            sender: Address paying for the deployment

        Returns:
            Transaction dict (unsigned)
        """
        contract = self.w3.eth.contract(abi=list(artifact.abi), bytecode=artifact.bytecode)
        constructor = contract.constructor(*constructor_args)

        if self.fixed_gas_limit:
            gas_limit = int(self.fixed_gas_limit)
        else:
            # Estimation failure means the node would reject the creation
            gas_estimate = constructor.estimate_gas({'from': sender})
            gas_limit = int(gas_estimate * self.gas_limit_buffer)

        chain_id = self.chain_id if self.chain_id is not None else self.w3.eth.chain_id

        tx_params = {
            'from': sender,
            'nonce': self.w3.eth.get_transaction_count(sender, 'pending'),
            'gas': gas_limit,
            'chainId': chain_id,
            'value': 0,
        }
        tx_params.update(self.gas_calculator.get_fee_params())

        transaction = constructor.build_transaction(tx_params)

        logger.info(f"Gas limit: {gas_limit}")
        logger.debug(f"Deployment transaction nonce {tx_params['nonce']} on chain {chain_id}")

        return transaction
