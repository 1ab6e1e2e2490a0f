"""Identity bounded context: customer records."""

from modeling.pipeline import UpdatePipeline
from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

identity = UpdatePipeline(name="identity")
