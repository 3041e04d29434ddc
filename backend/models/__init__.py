from .feed import FINAL_STATUS_CODES, LiveFeed, Play
from .hype import HOT_THRESHOLD, INSANE_THRESHOLD, WARM_THRESHOLD, HypeLevel, HypeState
from .moment import Moment
from .one_play import OPTION_COUNT, OnePlayState, Outcome, PlayCategory
from .sample import WinProbabilitySample, extract_last_sample

__all__ = [
    "WinProbabilitySample",
    "extract_last_sample",
    "Play",
    "LiveFeed",
    "FINAL_STATUS_CODES",
    "HypeLevel",
    "HypeState",
    "INSANE_THRESHOLD",
    "HOT_THRESHOLD",
    "WARM_THRESHOLD",
    "Moment",
    "PlayCategory",
    "Outcome",
    "OnePlayState",
    "OPTION_COUNT",
]
