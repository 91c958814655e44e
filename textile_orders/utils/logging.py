# textile_orders/utils/logging.py
import logging
import sys

from textile_orders.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _root_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger("textile_orders")
    #one handler for the whole package
    if not root.handlers:
        root.addHandler(_root_handler())
        root.setLevel(LOG_LEVEL)
        root.propagate = False

    if name == "textile_orders" or name.startswith("textile_orders."):
        return logging.getLogger(name)
    return root.getChild(name)
