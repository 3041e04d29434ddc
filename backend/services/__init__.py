from .errors import MalformedDataError, OnePlayRejected, PersistenceError, TransientFetchError
from .play_classifier import classify
from .prng import create_stream

__all__ = [
    "create_stream",
    "classify",
    "TransientFetchError",
    "MalformedDataError",
    "PersistenceError",
    "OnePlayRejected",
]
