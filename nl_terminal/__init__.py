"""Natural-language terminal assistant package."""

import logging
import os
from pathlib import Path

__version__ = "0.1.0"

# Setup logging
config_dir = Path(os.environ.get("NL_TERMINAL_HOME", Path.home() / ".config" / "nl-terminal"))
config_dir.mkdir(parents=True, exist_ok=True)
log_file = config_dir / "debug.log"

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("nl-terminal")
