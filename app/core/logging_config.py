import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route application logs to stderr; safe to call more than once."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # httpx logs every Supabase/OpenAI request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
