import logging
import os
import sys
from pathlib import Path

from gentlytold.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_ops_rules(rules: Rules, data_dir: Path, master_key: str | None) -> None:
    """
    Validate operational requirements before startup.
    """
    # 1. Required env
    missing = [name for name in rules.ops.required_env if name not in os.environ]
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    # 2. Data dir must be creatable/writable
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.critical("Data directory %s is not writable: %s", data_dir, e)
        sys.exit(1)

    # 3. Without a master key no admin tokens can be issued
    if not master_key:
        logger.warning("GENTLYTOLD_MASTER_KEY is not set; admin provisioning is disabled")

    logger.info("Configuration validated.")
