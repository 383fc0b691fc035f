"""
Every module logs through a child of the `coupons` logger, e.g.
`get_logger("engine")` -> `coupons.engine`. Output goes to stdout at LOG_LEVEL.
"""
import logging
import sys

from config import LOG_LEVEL

_root = logging.getLogger("coupons")
_root.setLevel(LOG_LEVEL)

if not _root.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    _root.addHandler(_handler)

# uvicorn installs its own root handlers
_root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return _root.getChild(name)
