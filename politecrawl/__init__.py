"""Polite, extensible web crawler engine."""
from politecrawl.domain import EndReason, Harvest, LogFlags, Options, URLContext
from politecrawl.services.crawler import Crawler
from politecrawl.services.extender import DefaultExtender
from politecrawl.utils.url_normalizer import NormalizationFlags

__all__ = [
    "Crawler",
    "DefaultExtender",
    "EndReason",
    "Harvest",
    "LogFlags",
    "NormalizationFlags",
    "Options",
    "URLContext",
]
