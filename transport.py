#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 16:27:50 krylon>
#
# /data/code/python/pymdscan/transport.py
# created on 14. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.transport

(c) 2026 Benjamin Walkenhorst

This file contains the network side of things: finding the network adapters,
sending queries and listening for whatever comes back.

The transport is the producer, the Resolver is the consumer. Datagrams are
handed over by calling on_datagram from one listener thread per adapter, so
the consumer must expect concurrent calls in no particular order.
"""

import contextlib
import logging
import socket
import time
import traceback
from dataclasses import dataclass, field
from ipaddress import ip_address
from threading import Event, Lock, Thread
from typing import Callable, Final, Optional, Protocol

import ifaddr

from pymdscan import common
from pymdscan.common import TransportError

mdns_group: Final[str] = "224.0.0.251"
mdns_port: Final[int] = 5353
rcv_buf: Final[int] = 9000

DatagramHandler = Callable[[str, bytes], None]


class Transport(Protocol):  # pylint: disable-msg=R0903
    """Transport sends a query and reports every datagram that arrives."""

    def request(self,
                query: bytes,
                scan_time: float,
                retries: int,
                retry_delay: float,
                on_datagram: DatagramHandler,
                adapter: Optional[str] = None,
                cancel: Optional[Event] = None) -> None:
        """Send <query> and call <on_datagram> for each datagram received.

        Blocks until scan time and retries are exhausted or <cancel> is set.
        on_datagram is never called after request has returned.
        """


@dataclass(kw_only=True, slots=True, frozen=True)
class Adapter:
    """Adapter is an IPv4 address on a local network interface."""

    name: str
    nice_name: str
    address: str

    def matches(self, pattern: str) -> bool:
        """Return True if <pattern> is the adapter's name, nice name or address."""
        return pattern in (self.name, self.nice_name, self.address)


def list_adapters() -> list[Adapter]:
    """Return the IPv4 adapters we can use for multicasting."""
    adapters: list[Adapter] = []

    for ad in ifaddr.get_adapters():
        for ip in ad.ips:
            if not ip.is_IPv4 or ip.network_prefix == 32:
                continue
            if ip_address(ip.ip).is_loopback:
                continue
            adapters.append(Adapter(name=str(ad.name),
                                    nice_name=str(ad.nice_name),
                                    address=ip.ip))

    return adapters


def is_answer(data: bytes) -> bool:
    """Return True if the QR bit in the header of <data> is set."""
    return len(data) > 2 and bool(data[2] & 0x80)


@dataclass(kw_only=True, slots=True)
class _Request:
    """The state shared by the listener threads of one request."""

    query: bytes
    scan_time: float
    retries: int
    retry_delay: float
    on_datagram: DatagramHandler
    cancel: Event
    abort: Event = field(default_factory=Event)
    lock: Lock = field(default_factory=Lock)
    errors: list[Exception] = field(default_factory=list)

    @property
    def halted(self) -> bool:
        """Return True if the request was cancelled or aborted."""
        return self.cancel.is_set() or self.abort.is_set()

    def fail(self, err: Exception) -> None:
        """Record an error and tell the other listeners to stop."""
        with self.lock:
            self.errors.append(err)
        self.abort.set()


@dataclass(kw_only=True, slots=True)
class MulticastTransport:
    """MulticastTransport talks mDNS on all (or selected) IPv4 adapters."""

    log: logging.Logger = field(default_factory=lambda: common.get_logger("transport"))
    group: str = mdns_group
    port: int = mdns_port
    poll: float = 0.25
    adapter_source: Callable[[], list[Adapter]] = list_adapters

    def select_adapters(self, adapter: Optional[str] = None) -> list[Adapter]:
        """Return the adapters to use. If <adapter> is given, only those matching it."""
        adapters: list[Adapter] = self.adapter_source()
        if adapter is not None:
            adapters = [a for a in adapters if a.matches(adapter)]
        return adapters

    def request(self,
                query: bytes,
                scan_time: float,
                retries: int,
                retry_delay: float,
                on_datagram: DatagramHandler,
                adapter: Optional[str] = None,
                cancel: Optional[Event] = None) -> None:
        """Send <query> on every adapter and listen for responses.

        Each adapter gets its own socket and listener thread. A listener sends
        the query, listens for <scan_time> seconds, and tries again after
        <retry_delay> seconds, up to <retries> times, until it has received an
        answer.
        """
        adapters: Final[list[Adapter]] = self.select_adapters(adapter)
        if len(adapters) == 0:
            msg = "No usable network adapter was found" if adapter is None \
                else f"No network adapter matches {adapter}"
            self.log.error(msg)
            raise TransportError(msg)

        req = _Request(query=query,
                       scan_time=scan_time,
                       retries=retries,
                       retry_delay=retry_delay,
                       on_datagram=on_datagram,
                       cancel=cancel if cancel is not None else Event())

        threads: list[Thread] = []
        for ad in adapters:
            t = Thread(target=self._listener,
                       name=f"mdns_{ad.name}_{ad.address}",
                       args=(ad, req),
                       daemon=True)
            t.start()
            threads.append(t)

        for t in threads:
            t.join()

        if req.errors:
            err = req.errors[0]
            raise TransportError(f"{err.__class__.__name__} during mDNS request: {err}") from err

    def _open_socket(self, ad: Adapter) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if hasattr(socket, "SO_REUSEPORT"):
                with contextlib.suppress(OSError):
                    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
            sock.bind(("", self.port))
            iface: Final[bytes] = socket.inet_aton(ad.address)
            sock.setsockopt(socket.IPPROTO_IP,
                            socket.IP_ADD_MEMBERSHIP,
                            socket.inet_aton(self.group) + iface)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, iface)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 255)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 1)
        except OSError:
            sock.close()
            raise
        return sock

    def _listener(self, ad: Adapter, req: _Request) -> None:
        self.log.debug("Listener for %s (%s) starting up.", ad.name, ad.address)
        try:
            with self._open_socket(ad) as sock:
                for attempt in range(req.retries + 1):
                    if attempt > 0 and not self._pause(req):
                        return
                    if req.halted:
                        return
                    self.log.debug("Send query on %s, attempt %d/%d",
                                   ad.address,
                                   attempt + 1,
                                   req.retries + 1)
                    sock.sendto(req.query, (self.group, self.port))
                    if self._listen(sock, req) > 0:
                        return
        except Exception as err:  # pylint: disable-msg=W0718
            cname: Final[str] = err.__class__.__name__
            self.log.error("%s on adapter %s (%s): %s\n%s",
                           cname,
                           ad.name,
                           ad.address,
                           err,
                           "\n".join(traceback.format_exception(err)))
            req.fail(err)
        finally:
            self.log.debug("Listener for %s (%s) is quitting.", ad.name, ad.address)

    def _pause(self, req: _Request) -> bool:
        """Sleep for the retry delay. Return False if we were halted meanwhile."""
        deadline: Final[float] = time.monotonic() + req.retry_delay
        while not req.halted:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return True
            req.cancel.wait(min(remaining, self.poll))
        return False

    def _listen(self, sock: socket.socket, req: _Request) -> int:
        """Receive datagrams until the scan time is up. Return the number of answers."""
        deadline: Final[float] = time.monotonic() + req.scan_time
        cnt: int = 0

        while not req.halted:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            sock.settimeout(min(remaining, self.poll))
            try:
                data, addr = sock.recvfrom(rcv_buf)
            except TimeoutError:
                continue
            if is_answer(data):
                cnt += 1
            req.on_datagram(addr[0], data)

        return cnt


# Local Variables: #
# python-indent: 4 #
# End: #
