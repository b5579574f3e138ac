import logging
import sys


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for command-line use.

    Library code only creates loggers; handlers are installed here so that
    applications importing env_config keep control of their own logging.

    Args:
        verbose: DEBUG output (field plans, failing variable) when True,
                 warnings and errors only otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
