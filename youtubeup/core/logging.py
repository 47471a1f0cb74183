"""Logger lookup for youtubeup modules."""

import logging

PACKAGE_LOGGER = 'youtubeup'


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the `youtubeup` hierarchy.

    Names outside the package are nested under it, so `get_logger('session')`
    and `get_logger('youtubeup.session')` are the same logger. Records
    propagate to the root handlers; until something installs a handler
    (basicConfig, RichHandler in the CLI) the logger stays at WARNING.

    Args:
        name: Dotted area name, e.g. 'youtubeup.upload.probe'
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"

    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger
