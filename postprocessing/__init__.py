"""Downstream stages run on extracted KWIC rows.

This package exposes its submodules for convenient imports like:

    from postprocessing import join_labels

"""

from . import count_followers
from . import extract_followers
from . import join_labels

__all__ = [
    "count_followers",
    "extract_followers",
    "join_labels",
]
