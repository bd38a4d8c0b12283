import logging


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def setup_logging(level='INFO'):
    """Attach a console handler to the root logger.

    Safe to call more than once; the handler is only added the first time.
    Module loggers created with ``logging.getLogger(__name__)`` inherit it.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if not any(getattr(handler, '_churchos', False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._churchos = True
        root.addHandler(handler)

    return root
