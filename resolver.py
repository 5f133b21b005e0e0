#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 17:14:02 krylon>
#
# /data/code/python/pymdscan/resolver.py
# created on 14. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.resolver

(c) 2026 Benjamin Walkenhorst

The Resolver ties together the codec, the mapper and the transport. By
default, only one scan may run at a time, since concurrent scans would see
each other's responses and retries. Callers that know what they are doing
may ask for overlapped scans.
"""

import logging
import time
import traceback
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field
from queue import Queue
from threading import Event, Lock, Thread
from typing import Callable, Final, Iterator, Optional, Union

from dns.exception import DNSException

from pymdscan import common
from pymdscan.aggregator import ResponseAggregator
from pymdscan.codec import decode_response, encode_query
from pymdscan.common import ScanCancelled
from pymdscan.mapper import response_to_host, sender_key
from pymdscan.model import Host, Response
from pymdscan.options import BrowseOptions, ResolveOptions, ScanOptions
from pymdscan.transport import MulticastTransport, Transport

HostCallback = Callable[[str, Host], None]
ResponseHandler = Callable[[str, Response], None]


@dataclass(kw_only=True, slots=True)
class ScanGate:
    """ScanGate makes sure only one non-overlapped scan runs at a time."""

    lock: Lock = field(default_factory=Lock)
    poll: float = 0.1

    def acquire(self, cancel: Optional[Event] = None) -> bool:
        """Wait for the gate. Return False if <cancel> was set before we got it."""
        if cancel is None:
            return self.lock.acquire()

        while not cancel.is_set():
            if self.lock.acquire(timeout=self.poll):
                return True
        return False

    def release(self) -> None:
        """Release the gate."""
        self.lock.release()

    @property
    def busy(self) -> bool:
        """Return True if a scan is holding the gate."""
        return self.lock.locked()

    @contextmanager
    def hold(self, cancel: Optional[Event] = None) -> Iterator['ScanGate']:
        """Hold the gate for the duration of a with block."""
        if not self.acquire(cancel):
            raise ScanCancelled("Scan was cancelled while waiting for another scan to finish")
        try:
            yield self
        finally:
            self.release()


class _Done:  # pylint: disable-msg=R0903
    """Marks the end of a stream."""


@dataclass(kw_only=True, slots=True)
class Resolver:
    """Resolver looks for hosts and services on the local network."""

    log: logging.Logger = field(default_factory=lambda: common.get_logger("resolver"))
    transport: Transport = field(default_factory=MulticastTransport)
    gate: ScanGate = field(default_factory=ScanGate)

    def _run(self,
             query: bytes,
             opt: ScanOptions,
             handler: ResponseHandler,
             cancel: Optional[Event]) -> None:
        """Send <query> and pass every response we receive to <handler>."""
        if cancel is not None and cancel.is_set():
            raise ScanCancelled("Scan was cancelled before it started")

        def on_datagram(addr: str, data: bytes) -> None:
            try:
                response: Response = decode_response(data)
            except DNSException as err:
                self.log.debug("Discard undecodable datagram (%d bytes) from %s: %s",
                               len(data),
                               addr,
                               err)
                return

            if not response.is_response:
                return

            handler(addr, response)

        guard = nullcontext() if opt.allow_overlapped else self.gate.hold(cancel)

        with guard:
            if cancel is not None and cancel.is_set():
                raise ScanCancelled("Scan was cancelled before it started")

            self.transport.request(query,
                                   opt.scan_time,
                                   opt.retries,
                                   opt.retry_delay,
                                   on_datagram,
                                   adapter=opt.adapter,
                                   cancel=cancel)

    def resolve(self,
                opt: ResolveOptions,
                cancel: Optional[Event] = None,
                callback: Optional[HostCallback] = None) -> dict[str, Host]:
        """Query the network for the protocols in <opt> and return what we found.

        The result maps sender keys to Hosts. If <callback> is given, it is
        called with the sender key and a copy of the Host every time a
        response has been merged. If <cancel> is set during the scan, the
        Hosts found so far are returned.
        """
        query: Final[bytes] = encode_query(opt.protocols, opt.query_types, opt.class_type)
        agg: Final[ResponseAggregator] = ResponseAggregator()
        started: Final[float] = time.monotonic()

        def handle(addr: str, response: Response) -> None:
            try:
                host: Host = response_to_host(response, addr)
            except ValueError as err:
                self.log.debug("Discard malformed response from %s: %s",
                               addr,
                               err)
                return

            key: str = sender_key(addr, response, host)
            merged: Host = agg.merge(key, host)
            if callback is not None:
                callback(key, merged)

        self.log.debug("Looking for %s with scan time %.1f",
                       ", ".join(opt.protocols),
                       opt.scan_time)

        self._run(query, opt, handle, cancel)

        result: Final[dict[str, Host]] = agg.snapshot()
        self.log.debug("Scan for %s finished after %.2f seconds, found %d host(s)%s",
                       ", ".join(opt.protocols),
                       time.monotonic() - started,
                       len(result),
                       " (cancelled)" if cancel is not None and cancel.is_set() else "")
        return result

    def stream(self,
               opt: ResolveOptions,
               cancel: Optional[Event] = None) -> Iterator[tuple[str, Host]]:
        """Resolve in a background thread and yield (key, Host) as they come in.

        Closing the generator early sets <cancel>.
        """
        if cancel is None:
            cancel = Event()
        q: Queue[Union[tuple[str, Host], _Done]] = Queue()
        failure: list[Exception] = []
        finished: bool = False

        def worker() -> None:
            try:
                self.resolve(opt, cancel, lambda key, host: q.put((key, host)))
            except Exception as err:  # pylint: disable-msg=W0718
                self.log.debug("Streaming resolve failed: %s\n%s",
                               err,
                               "\n".join(traceback.format_exception(err)))
                failure.append(err)
            finally:
                q.put(_Done())

        t = Thread(target=worker, name="resolver_stream", daemon=True)
        t.start()

        try:
            while True:
                item = q.get()
                if isinstance(item, _Done):
                    finished = True
                    break
                yield item
        finally:
            if not finished:
                cancel.set()
            t.join()

        if failure:
            raise failure[0]

    def browse_domains(self,
                       opt: Optional[BrowseOptions] = None,
                       cancel: Optional[Event] = None) -> dict[str, list[str]]:
        """Find out which service types are advertised on the network.

        Returns a dict that maps each service type to the addresses of the
        hosts that advertised it.
        """
        if opt is None:
            opt = BrowseOptions()
        ropt: Final[ResolveOptions] = opt.resolve_options()
        query: Final[bytes] = encode_query(ropt.protocols, ropt.query_types, ropt.class_type)
        lock: Final[Lock] = Lock()
        domains: dict[str, list[str]] = {}

        def handle(addr: str, response: Response) -> None:
            with lock:
                for ptr in response.pointers:
                    addrs = domains.setdefault(ptr.target, [])
                    if addr not in addrs:
                        addrs.append(addr)

        self._run(query, ropt, handle, cancel)

        with lock:
            return {k: list(v) for k, v in domains.items()}


_default_lock: Final[Lock] = Lock()
_default: Optional[Resolver] = None  # pylint: disable-msg=C0103


def default_resolver() -> Resolver:
    """Return the process-wide Resolver, creating it on first use.

    The instance lives as long as the process does. All callers going through
    it share one ScanGate.
    """
    global _default  # pylint: disable-msg=W0603
    with _default_lock:
        if _default is None:
            _default = Resolver()
        return _default


def resolve(opt: ResolveOptions,
            cancel: Optional[Event] = None,
            callback: Optional[HostCallback] = None) -> dict[str, Host]:
    """Resolve using the process-wide Resolver."""
    return default_resolver().resolve(opt, cancel, callback)


def browse_domains(opt: Optional[BrowseOptions] = None,
                   cancel: Optional[Event] = None) -> dict[str, list[str]]:
    """Browse domains using the process-wide Resolver."""
    return default_resolver().browse_domains(opt, cancel)


# Local Variables: #
# python-indent: 4 #
# End: #
