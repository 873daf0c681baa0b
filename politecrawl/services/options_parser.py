import logging
import os
from typing import List, NamedTuple, Optional

import yaml

from politecrawl.domain.enums import LogFlags
from politecrawl.domain.options import Options
from politecrawl.utils.url_normalizer import NormalizationFlags

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = {
    "user_agent": str,
    "robot_user_agent": str,
    "max_visits": int,
    "crawl_delay": float,
    "worker_idle_ttl": float,
    "same_host_only": bool,
    "head_before_get": bool,
}


class CrawlFile(NamedTuple):
    options: Options
    seeds: List[str]


def _flags_value(raw) -> str:
    if isinstance(raw, (list, tuple)):
        return "|".join(str(x) for x in raw)
    return str(raw)


class OptionsParser:
    """Parse a YAML dict into Options.

    Responsibility: schema/validation for crawl option files.
    It does NOT perform filesystem IO.
    """

    def parse(self, data: dict, *, extender=None) -> Options:
        opts = Options(extender=extender)
        for key, value in data.items():
            if key == "seeds":
                continue
            if key in _SCALAR_FIELDS:
                setattr(opts, key, _SCALAR_FIELDS[key](value))
            elif key == "normalization_flags":
                opts.normalization_flags = NormalizationFlags.parse(_flags_value(value))
            elif key == "log_flags":
                opts.log_flags = LogFlags.parse(_flags_value(value))
            else:
                logger.warning("Ignoring unknown option %r", key)
        return opts

    def parse_seeds(self, data: dict) -> List[str]:
        seeds = data.get("seeds") or []
        if isinstance(seeds, str):
            return [seeds]
        return [str(s) for s in seeds]


def load_crawl_file(path: str, *, extender=None, parser: Optional[OptionsParser] = None) -> Optional[CrawlFile]:
    """Read a YAML crawl file. Returns None if it is missing or not a mapping."""
    parser = parser or OptionsParser()
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        logger.warning("Crawl file %s does not contain a mapping", path)
        return None
    return CrawlFile(parser.parse(data, extender=extender), parser.parse_seeds(data))
