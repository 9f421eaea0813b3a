"""
Deployment Errors
One error class per deployment stage
"""


class DeploymentError(Exception):
    """
    Base class for every deployment failure

    Attributes:
        stage: Name of the stage that failed
        exit_code: Process exit status reported for this failure
    """

    stage = "deployment"
    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class ConfigurationError(DeploymentError):
    """Invalid configuration detected before the run starts"""

    stage = "configuration"


class ArtifactResolutionError(DeploymentError):
    """Compiled artifact could not be found or is not deployable"""

    stage = "resolve"


class SubmissionError(DeploymentError):
    """Deployment transaction could not be built, signed or sent"""

    stage = "submit"


class ConfirmationError(DeploymentError):
    """Waiting for inclusion failed, or the creation was reverted"""

    stage = "confirm"


class AddressResolutionError(DeploymentError):
    """Transaction was included but the contract address is unknown"""

    stage = "address"
