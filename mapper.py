#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 15:31:09 krylon>
#
# /data/code/python/pymdscan/mapper.py
# created on 13. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.mapper

(c) 2026 Benjamin Walkenhorst

Turn a decoded Response into a Host.
"""

from itertools import chain
from typing import Optional

from pymdscan.model import (AddressRecord, Host, RecordKind, Response,
                            Service, ServiceRecord, TextRecord, TxtRecord)


def first_label(name: str) -> str:
    """Return the part of <name> before the first dot."""
    return name.split(".")[0]


def parse_text_entries(rec: TextRecord, entries: tuple[str, ...]) -> None:
    """Add the key/value pairs in <entries> to <rec>.

    Only the first '=' separates key and value. An entry without '=' is a flag
    and gets a value of None. Trailing NULs are stripped from values.
    """
    for entry in entries:
        key, sep, val = entry.partition("=")
        if key.strip() == "":
            continue
        if sep == "":
            rec.add_property(key, None)
        else:
            rec.add_property(key, val.rstrip("\0"))


def response_to_host(response: Response, remote_addr: str) -> Host:
    """Build a Host from the records in <response>.

    The display name comes from the first PTR record, failing that from the
    SRV record, failing that from the TXT record. Only the first SRV and the
    first TXT record are looked at.
    """
    host = Host()

    for rec in chain(response.answers, response.additionals):
        match rec:
            case AddressRecord(address=addr):
                host.add_address(addr)

    host.host_id = host.address or remote_addr

    for ptr in response.pointers:
        host.add_domain_name(ptr.target)
        if host.display_name is None:
            host.display_name = first_label(ptr.target)

    match response.first(RecordKind.Service):
        case ServiceRecord(name=name, port=port, ttl=ttl):
            host.add_domain_name(name)
            if host.display_name is None:
                host.display_name = first_label(name)
            host.add_service(Service(name=name, port=port, ttl=ttl))

    match response.first(RecordKind.Text):
        case TxtRecord(name=name, ttl=ttl, entries=entries):
            trec = TextRecord(name=name, ttl=ttl)
            host.add_domain_name(name)
            if host.display_name is None:
                host.display_name = first_label(name)
            parse_text_entries(trec, entries)
            host.add_text_record(trec)

    return host


def sender_key(remote_addr: str, response: Response, host: Host) -> str:
    """Compute the key under which a datagram's Host is aggregated.

    The key is the sender's address, plus the first label of the first PTR
    target if there is one. Without a PTR record we fall back to the Host's
    display name, so the SRV/TXT answers a sender sends after its PTR answer
    end up on the same Host.
    """
    name: Optional[str] = None
    pointers = response.pointers

    if pointers:
        name = first_label(pointers[0].target)
    elif host.display_name:
        name = host.display_name

    if name:
        return f"{remote_addr}: {name}"
    return remote_addr


# Local Variables: #
# python-indent: 4 #
# End: #
