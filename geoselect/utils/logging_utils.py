import logging
import sys
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level=logging.INFO, verbose: bool = False, stream: Optional[IO] = None):
    """Configure root logging for the command line.

    Records go to stderr by default so that command results printed on stdout
    can be piped on their own.
    """
    log_level = logging.DEBUG if verbose else level
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        stream=stream if stream is not None else sys.stderr,
    )
    # Vector file drivers are chatty at debug level
    logging.getLogger("pyogrio").setLevel(logging.WARNING)
    logging.getLogger("fiona").setLevel(logging.WARNING)
