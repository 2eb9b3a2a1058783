"""
Configuration Loader.

This module initializes the global configuration object (`config`) used
throughout the harness. It leverages `yacs` to provide a hierarchical,
dot-accessible configuration structure defined in `forklift.core_config`.

Usage:
    from forklift.config import config
    print(config.ENGINE.BINARY)
"""

import logging

from forklift.core_config import get_cfg_defaults

config = get_cfg_defaults()

# Freeze config to prevent accidental changes during runtime.
config.freeze()

logger = logging.getLogger(__name__)
