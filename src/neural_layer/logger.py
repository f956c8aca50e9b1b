import logging


LOG_FORMAT = '[%(asctime)s] %(levelname)-8s %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level=logging.INFO, filename=None, stdout=True):
    """
    Attach handlers to the ``neural_layer`` package logger.

    Library modules only create loggers; handlers are installed here, by the
    driver. Calling this again replaces the previously installed handlers.

    Returns the configured package logger.
    """
    logger = logging.getLogger('neural_layer')
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if filename is not None:
        fhandler = logging.FileHandler(filename, mode='w')
        fhandler.setFormatter(formatter)
        logger.addHandler(fhandler)

    if stdout:
        shandler = logging.StreamHandler()
        shandler.setFormatter(formatter)
        logger.addHandler(shandler)

    return logger
