"""
Configuration settings for the cutlist optimizer
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Stock roll defaults (mm)
DEFAULT_STOCK_WIDTH = 3000
DEFAULT_STOCK_LENGTH = 10000
DEFAULT_KERF_THICKNESS = 0
DEFAULT_OPTIMIZATION_PRIORITY = 'largest_area_first'

# Optimization Settings
DEFAULT_OPTIMIZATION_PARAMS = {
    'stock_width': float(os.getenv('CUTLIST_STOCK_WIDTH', DEFAULT_STOCK_WIDTH)),
    'stock_length': float(os.getenv('CUTLIST_STOCK_LENGTH', DEFAULT_STOCK_LENGTH)),
    'kerf_thickness': float(os.getenv('CUTLIST_KERF_THICKNESS', DEFAULT_KERF_THICKNESS)),
    'optimization_priority': os.getenv('CUTLIST_OPTIMIZATION_PRIORITY', DEFAULT_OPTIMIZATION_PRIORITY),
}

# Debug settings
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
ENABLE_DETAILED_LOGGING = os.getenv('ENABLE_DETAILED_LOGGING', 'false').lower() == 'true'


def setup_logging(level: str = None):
    """Configure root logging for applications embedding the optimizer"""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
