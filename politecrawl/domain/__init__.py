"""Domain objects for politecrawl - explicit re-exports to satisfy linters."""
from .enums import CrawlErrorKind as CrawlErrorKind
from .enums import EndReason as EndReason
from .enums import LogFlags as LogFlags
from .fetch_info import DelayInfo as DelayInfo
from .fetch_info import FetchInfo as FetchInfo
from .http_response import HttpResponse as HttpResponse
from .options import Options as Options
from .url_context import Harvest as Harvest
from .url_context import HarvestKind as HarvestKind
from .url_context import URLContext as URLContext
from .visited_tracker import VisitedTracker as VisitedTracker

__all__ = [
    "CrawlErrorKind",
    "EndReason",
    "LogFlags",
    "DelayInfo",
    "FetchInfo",
    "HttpResponse",
    "Options",
    "Harvest",
    "HarvestKind",
    "URLContext",
    "VisitedTracker",
]
