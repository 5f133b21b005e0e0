#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 18:20:44 krylon>
#
# /data/code/python/pymdscan/testdata.py
# created on 15. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.testdata

(c) 2026 Benjamin Walkenhorst

Helpers for the tests to build mDNS datagrams, so we don't need a network to
test the interesting parts.
"""

from typing import Iterable, Union

import dns.message
import dns.name
import dns.rrset
from dns import flags
from dns.rdataclass import RdataClass
from dns.rdatatype import RdataType
from dns.rdtypes.ANY.TXT import TXT
from dns.rrset import RRset


def a(name: str, addr: str, ttl: int = 120) -> RRset:
    """Return an A record."""
    return dns.rrset.from_text(name, ttl, "IN", "A", addr)


def a_flush(name: str, addr: str, ttl: int = 120) -> RRset:
    """Return an A record with the cache-flush bit set, as mDNS responders send them."""
    raw: str = "".join(f"{int(x):02x}" for x in addr.split("."))
    return dns.rrset.from_text(name, ttl, 0x8001, "A", f"\\# 4 {raw}")


def ptr(name: str, target: str, ttl: int = 4500) -> RRset:
    """Return a PTR record."""
    return dns.rrset.from_text(name, ttl, "IN", "PTR", target)


def srv(name: str, port: int, target: str = "host.local.", ttl: int = 120) -> RRset:
    """Return an SRV record."""
    return dns.rrset.from_text(name, ttl, "IN", "SRV", f"0 0 {port} {target}")


def txt(name: str, *entries: Union[str, bytes], ttl: int = 4500) -> RRset:
    """Return a TXT record with one character string per entry."""
    rd = TXT(RdataClass.IN, RdataType.TXT, entries)
    return dns.rrset.from_rdata(name, ttl, rd)


def response(answers: Iterable[RRset] = (),
             additionals: Iterable[RRset] = (),
             qr: bool = True) -> bytes:
    """Assemble an mDNS message and return its wire format."""
    msg = dns.message.Message(id=0)
    msg.flags = (flags.QR | flags.AA) if qr else 0
    for rr in answers:
        msg.answer.append(rr)
    for rr in additionals:
        msg.additional.append(rr)
    return msg.to_wire()


# Local Variables: #
# python-indent: 4 #
# End: #
