"""Logging setup and exit-code handling shared by the operator scripts."""

import os
import asyncio
import logging
from typing import Any, Coroutine, Optional

from deployer.exceptions import DeployerError
from deployer.types import RunStatus

LOG_FILE_ENV = "LETSPAY_LOG_FILE"
DEFAULT_LOG_FILE = "letspay_deployer.log"
INTERRUPTED_EXIT_CODE = 130

logger = logging.getLogger(__name__)


def setup_logging(log_file: Optional[str] = None) -> None:
    """Log to both a file and the console."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file or os.getenv(LOG_FILE_ENV, DEFAULT_LOG_FILE)),
            logging.StreamHandler()
        ]
    )


def run_flow(flow: Coroutine[Any, Any, Any]) -> int:
    """
    Run an operator flow to completion and map the outcome to an exit code.

    0 for a completed run or an operator cancellation, 1 for any failure,
    130 for Ctrl-C outside a prompt.
    """
    try:
        result = asyncio.run(flow)
    except KeyboardInterrupt:
        logger.error("Interrupted while the flow was running; check the chain state before retrying")
        return INTERRUPTED_EXIT_CODE
    except DeployerError as e:
        logger.error(f"{type(e).__name__}: {e}", exc_info=True)
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    if result.status == RunStatus.CANCELLED:
        logger.info("Nothing was sent to the network.")
    return 0
