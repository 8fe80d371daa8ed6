"""Stockroom bounded context — products and their recent stock movements.

Each product keeps a running stock quantity and a fixed-capacity history of
the last few movements applied to it.
"""

from protean.domain import Domain

from stockroom.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
stockroom = Domain(name="stockroom")
