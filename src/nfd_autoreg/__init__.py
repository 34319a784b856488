"""nfd-autoreg — automatic prefix registration for new forwarder faces."""

import logging

from nfd_mgmt import NfdController

from .config import FilterConfig, Settings
from .core.engine import ReconciliationEngine

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def log_filter_config(config: FilterConfig) -> None:
    """Dump the effective prefixes and network filters."""
    logger.info("AUTOREG prefixes:")
    for prefix in config.autoreg_prefixes:
        logger.info(f"  {prefix}")
    logger.info("ALL-FACES-AUTOREG prefixes:")
    for prefix in config.all_faces_prefixes:
        logger.info(f"  {prefix}")

    if config.blacklist:
        logger.info("Blacklisted networks:")
        for network in config.blacklist:
            logger.info(f"  {network}")

    logger.info("Whitelisted networks:")
    for network in config.whitelist:
        logger.info(f"  {network}")


async def run_autoreg(settings: Settings, config: FilterConfig) -> None:
    """Run the autoreg service until SIGINT/SIGTERM."""
    log_filter_config(config)

    controller = NfdController(
        nats_url=settings.nats_url,
        timeout=settings.request_timeout,
    )
    await controller.connect()

    engine = ReconciliationEngine(controller, config)
    try:
        await engine.run()
    finally:
        await controller.close()
