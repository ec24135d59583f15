from shortlinks.utils.logging import initialize_logging


# Configure JSON logging before any handler module logs
initialize_logging()
