"""
Main entry point for the Better Stack Operator.
"""
import kopf
from loguru import logger
from dotenv import load_dotenv

from betterstack_operator.handlers import register_handlers
from betterstack_operator.handlers.startup import configure_operator, start_runtime, stop_runtime
from betterstack_operator.utils.config import Config

# Load environment variables
load_dotenv()

# Initialize configuration
config = Config()

# Configure logging
if config.log_file:
    logger.add(config.log_file, rotation="1 day", retention="7 days", level=config.log_level)
logger.info("Starting Better Stack Operator")


@kopf.on.startup()
async def startup(settings: kopf.OperatorSettings, memo: kopf.Memo, **kwargs):
    """Configure the operator and build the shared clients and reconcilers."""
    configure_operator(settings, config)
    await start_runtime(memo, config)


@kopf.on.cleanup()
async def cleanup(memo: kopf.Memo, **kwargs):
    """Close the shared HTTP client."""
    await stop_runtime(memo)


# Register all handlers
register_handlers()


if __name__ == "__main__":
    # Run the operator
    logger.info("Running Better Stack Operator")
    kopf.run()
