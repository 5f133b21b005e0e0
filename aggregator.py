#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 15:44:27 krylon>
#
# /data/code/python/pymdscan/aggregator.py
# created on 13. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.aggregator

(c) 2026 Benjamin Walkenhorst
"""

from dataclasses import dataclass, field
from threading import RLock

from pymdscan.model import Host


@dataclass(kw_only=True, slots=True)
class ResponseAggregator:
    """ResponseAggregator collects the Hosts of one scan, keyed by sender.

    It is shared by the callbacks the transport invokes from its listener
    threads, so all access goes through one lock.
    """

    lock: RLock = field(default_factory=RLock)
    hosts: dict[str, Host] = field(default_factory=dict)

    def get_or_create(self, key: str) -> Host:
        """Return the Host stored under <key>, creating an empty one if needed."""
        with self.lock:
            try:
                return self.hosts[key]
            except KeyError:
                host = Host()
                self.hosts[key] = host
                return host

    def merge(self, key: str, host: Host) -> Host:
        """Merge <host> into the entry for <key> and return a copy of the result."""
        with self.lock:
            entry: Host = self.get_or_create(key)
            entry.merge(host)
            return entry.copy()

    def snapshot(self) -> dict[str, Host]:
        """Return a copy of everything collected so far."""
        with self.lock:
            return {k: v.copy() for k, v in self.hosts.items()}

    def __len__(self) -> int:
        with self.lock:
            return len(self.hosts)

    def __contains__(self, key: object) -> bool:
        with self.lock:
            return key in self.hosts


# Local Variables: #
# python-indent: 4 #
# End: #
