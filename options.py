#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 14:40:52 krylon>
#
# /data/code/python/pymdscan/options.py
# created on 13. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.options

(c) 2026 Benjamin Walkenhorst

This file contains the parameters of a scan and the code to load their
defaults from the configuration file.
"""

import tomllib
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Final, Optional, Sequence, Union

from pymdscan import common

browse_domain: Final[str] = "_services._dns-sd._udp.local."


class QueryType(Enum):
    """QueryType is the record type we ask for."""

    PTR = auto()
    SRV = auto()
    TXT = auto()
    ANY = auto()

    @classmethod
    def parse(cls, s: str) -> 'QueryType':
        """Look up a QueryType by name. Anything we don't know becomes ANY."""
        try:
            return cls[s.strip().upper()]
        except KeyError:
            return cls.ANY


class ClassType(Enum):
    """ClassType selects the record class of our questions."""

    IN = auto()
    ANY = auto()


@dataclass(kw_only=True, slots=True)
class ScanOptions:
    """ScanOptions holds the timing and network parameters shared by all scans."""

    scan_time: float = 2.0
    retries: int = 2
    retry_delay: float = 2.0
    allow_overlapped: bool = False
    adapter: Optional[str] = None

    def __post_init__(self) -> None:
        if self.scan_time < 0:
            raise ValueError(f"scan_time must not be negative: {self.scan_time}")
        if self.retries < 0:
            raise ValueError(f"retries must not be negative: {self.retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must not be negative: {self.retry_delay}")


@dataclass(kw_only=True, slots=True)
class ResolveOptions(ScanOptions):
    """ResolveOptions describes what to ask for when resolving services."""

    protocols: Sequence[str]
    query_types: Sequence[QueryType] = field(default_factory=lambda: [QueryType.PTR])
    class_type: ClassType = ClassType.IN

    def __post_init__(self) -> None:
        super(ResolveOptions, self).__post_init__()
        if isinstance(self.protocols, str):
            self.protocols = [self.protocols]
        if len(self.protocols) == 0:
            raise ValueError("At least one protocol is required")
        for p in self.protocols:
            if p is None or p.strip() == "":
                raise ValueError("Protocol names must not be empty")
        if len(self.query_types) == 0:
            raise ValueError("At least one query type is required")


@dataclass(kw_only=True, slots=True)
class BrowseOptions(ScanOptions):
    """BrowseOptions holds the parameters for browsing the available service types."""

    def resolve_options(self) -> ResolveOptions:
        """Return the ResolveOptions for the meta-query."""
        return ResolveOptions(protocols=[browse_domain],
                              query_types=[QueryType.PTR],
                              class_type=ClassType.IN,
                              scan_time=self.scan_time,
                              retries=self.retries,
                              retry_delay=self.retry_delay,
                              allow_overlapped=self.allow_overlapped,
                              adapter=self.adapter)


def _convert(key: str, val: Any) -> Any:
    match key:
        case "query_types":
            return [QueryType.parse(x) for x in val]
        case "class_type":
            try:
                return ClassType[str(val).upper()]
            except KeyError as err:
                raise ValueError(f"Invalid class_type {val}, must be one of in, any") from err
        case "scan_time" | "retry_delay":
            return float(val)
        case "retries":
            return int(val)
        case "allow_overlapped":
            return bool(val)
        case _:
            return val


def load_config(cfg_path: Optional[Union[str, Path]] = None) -> dict[str, Any]:
    """Read the [resolve] table of the configuration file.

    Returns a dict of option values suitable for passing to ResolveOptions.
    If the file does not exist, the dict is empty.
    """
    if cfg_path is None:
        cfg_path = common.path.config
    cfg_path = Path(cfg_path)

    if not cfg_path.exists():
        return {}

    with open(cfg_path, "rb") as fh:
        raw: dict[str, Any] = tomllib.load(fh)

    section: dict[str, Any] = raw.get("resolve", {})
    known: Final[set[str]] = {"protocols", "query_types", "class_type", "scan_time",
                              "retries", "retry_delay", "allow_overlapped", "adapter"}
    cfg: dict[str, Any] = {}

    for key, val in section.items():
        if key not in known:
            raise ValueError(f"Unknown configuration option resolve.{key} in {cfg_path}")
        cfg[key] = _convert(key, val)

    return cfg


# Local Variables: #
# python-indent: 4 #
# End: #
