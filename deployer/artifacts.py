"""Loads compiled Hardhat artifacts (ABI + bytecode) for the contracts we deploy."""

import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .exceptions import ArtifactError

logger = logging.getLogger(__name__)

ARTIFACTS_DIR_ENV = "LETSPAY_ARTIFACTS_DIR"
DEFAULT_ARTIFACTS_DIR = "artifacts"

IMPLEMENTATION_V1 = "LetsPayHBAR_V1_UUPS"
IMPLEMENTATION_V2 = "LetsPayHBAR_V2_UUPS"
PROXY = "ERC1967Proxy"

# contract name -> Solidity source file holding it
SOURCE_FILES: Dict[str, str] = {
    IMPLEMENTATION_V1: "LetsPayHBAR_V1_UUPS.sol",
    IMPLEMENTATION_V2: "LetsPayHBAR_V2_UUPS.sol",
    PROXY: "Proxy.sol",
}


@dataclass(frozen=True)
class Artifact:
    """Compiled contract interface and creation bytecode"""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str


class ArtifactProvider:
    def __init__(self, artifacts_dir: Optional[str] = None):
        self.artifacts_dir = artifacts_dir or DEFAULT_ARTIFACTS_DIR

    def artifact_path(self, contract_name: str) -> str:
        source_file = SOURCE_FILES.get(contract_name, f"{contract_name}.sol")
        return os.path.join(self.artifacts_dir, "contracts", source_file, f"{contract_name}.json")

    def load(self, contract_name: str) -> Artifact:
        """
        Load the ABI and bytecode of a contract.

        Raises:
            ArtifactError: the artifact is missing, unreadable, or lacks abi/bytecode
        """
        path = self.artifact_path(contract_name)
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ArtifactError(
                f"Artifact for {contract_name} not found at {path}. Compile the contracts first."
            ) from e
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactError(f"Could not read artifact at {path}: {e}") from e

        abi = data.get('abi') if isinstance(data, dict) else None
        bytecode = data.get('bytecode') if isinstance(data, dict) else None
        if not abi or not bytecode or bytecode in ("0x", "0X"):
            raise ArtifactError(f"Artifact at {path} is missing abi or bytecode.")

        if not bytecode.startswith(("0x", "0X")):
            bytecode = "0x" + bytecode

        logger.debug(f"Loaded artifact {contract_name} from {path}")
        return Artifact(name=contract_name, abi=abi, bytecode=bytecode)
