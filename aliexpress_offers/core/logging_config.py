import logging
import os
from datetime import datetime
from typing import Optional

from aliexpress_offers.core.config import Settings, get_settings

def configure_logging(settings: Optional[Settings] = None):
    """Configure application logging."""
    settings = settings or get_settings()

    handlers = [logging.StreamHandler()]
    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        log_filename = os.path.join(
            settings.log_dir, f"app_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )
        handlers.append(logging.FileHandler(log_filename))

    # DEBUG wins over the configured level
    log_level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    logging.getLogger('httpx').setLevel(logging.INFO)
    logging.getLogger('httpcore').setLevel(logging.INFO)

    if log_level == logging.DEBUG:
        logging.getLogger('aliexpress_offers.scrapers').setLevel(logging.DEBUG)
        logging.getLogger('aliexpress_offers.services').setLevel(logging.DEBUG)
