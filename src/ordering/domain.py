"""Ordering bounded context: order lifecycle and fulfillment workflow.

The ``ordering`` pipeline is the composition root: every model in this
context registers its guard configuration with it at import time.
"""

from modeling.pipeline import UpdatePipeline
from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = UpdatePipeline(name="ordering")
