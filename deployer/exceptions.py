"""
Error kinds raised by the LetsPay deployer.

Every fatal condition derives from DeployerError so the scripts can report it
and exit non-zero. Operator cancellation is not an error and has no class here.
"""


class DeployerError(Exception):
    """Base exception for all deployer failures."""

    pass


class ConfigurationError(DeployerError):
    """Raised when the environment cannot be resolved into a usable network config."""

    pass


class ArtifactError(DeployerError):
    """Raised when a compiled artifact is missing its ABI or bytecode."""

    pass


class EstimationError(DeployerError):
    """Raised when any gas or gas price probe fails."""

    pass


class ValidationError(DeployerError, ValueError):
    """Raised when operator-supplied input is malformed."""

    pass


class AuthorizationError(DeployerError):
    """Raised when the deployer is not the recorded owner of the proxy."""

    pass


class ChainError(DeployerError):
    """Raised when a transaction cannot be submitted or did not succeed."""

    pass


class DeploymentError(ChainError):
    """Raised when the external deployment runner fails."""

    pass
