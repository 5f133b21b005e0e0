#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 15:08:44 krylon>
#
# /data/code/python/pymdscan/codec.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.codec

(c) 2026 Benjamin Walkenhorst

Translate between our types and the wire format. The heavy lifting is done by
dnspython.
"""

import struct
from typing import Final, Sequence

import dns.message
import dns.name
import dns.wire
from dns import flags
from dns.exception import DNSException
from dns.rdataclass import RdataClass
from dns.rdatatype import RdataType
from dns.rdtypes.ANY.PTR import PTR
from dns.rdtypes.ANY.TXT import TXT
from dns.rdtypes.IN.A import A
from dns.rdtypes.IN.SRV import SRV
from dns.rrset import RRset

from pymdscan.common import CodecError
from pymdscan.model import (AddressRecord, OtherRecord, PointerRecord, Record,
                            Response, ServiceRecord, TxtRecord)
from pymdscan.options import ClassType, QueryType

cache_flush: Final[int] = 0x8000

qtypes: Final[dict[QueryType, RdataType]] = {
    QueryType.PTR: RdataType.PTR,
    QueryType.SRV: RdataType.SRV,
    QueryType.TXT: RdataType.TXT,
}

qclasses: Final[dict[ClassType, RdataClass]] = {
    ClassType.IN: RdataClass.IN,
    ClassType.ANY: RdataClass.ANY,
}


def query_type_to_rdtype(qt: QueryType) -> RdataType:
    """Map a QueryType to the corresponding record type. Unknown types become ANY."""
    return qtypes.get(qt, RdataType.ANY)


def encode_query(protocols: Sequence[str],
                 query_types: Sequence[QueryType],
                 class_type: ClassType = ClassType.IN) -> bytes:
    """Build a query with one question per protocol and query type."""
    rdclass: Final[RdataClass] = qclasses[class_type]
    msg = dns.message.QueryMessage(id=0)
    msg.flags = 0

    try:
        for proto in protocols:
            qname = dns.name.from_text(proto)
            for qt in query_types:
                msg.find_rrset(msg.question,
                               qname,
                               rdclass,
                               query_type_to_rdtype(qt),
                               create=True,
                               force_unique=True)
        return msg.to_wire()
    except DNSException as err:
        raise CodecError(f"Cannot encode query for {list(protocols)}: {err}") from err


def name_text(name: dns.name.Name) -> str:
    """Render a Name as text, without the trailing dot and without escaping.

    mDNS instance names are UTF-8 and frequently contain spaces, so the usual
    master file presentation format is not what we want here.
    """
    return ".".join(label.decode("utf-8", errors="replace") for label in name.labels if label)


def clear_cache_flush(wire: bytes) -> bytes:
    """Clear the cache-flush bit in the class of every resource record.

    dnspython does not know about mDNS, so it would treat the class 0x8001 as
    unknown and refuse to parse A and SRV records as such.
    """
    buf: Final[bytearray] = bytearray(wire)
    parser = dns.wire.Parser(wire)
    (_, _, qcount, ancount, aucount, adcount) = parser.get_struct("!HHHHHH")

    for _ in range(qcount):
        parser.get_name()
        offset: int = parser.current
        (_, qclass) = parser.get_struct("!HH")
        if qclass & cache_flush:
            struct.pack_into("!H", buf, offset + 2, qclass & ~cache_flush)

    for _ in range(ancount + aucount + adcount):
        parser.get_name()
        offset = parser.current
        (rdtype, rdclass, _, rdlen) = parser.get_struct("!HHIH")
        if rdtype != RdataType.OPT and rdclass & cache_flush:
            struct.pack_into("!H", buf, offset + 2, rdclass & ~cache_flush)
        parser.get_bytes(rdlen)

    return bytes(buf)


def _convert_rrset(rrset: RRset) -> list[Record]:
    owner: Final[str] = name_text(rrset.name)
    ttl: Final[int] = int(rrset.ttl)
    records: list[Record] = []

    for rd in rrset:
        match rd:
            case A(address=addr):
                records.append(AddressRecord(name=owner, ttl=ttl, address=str(addr)))
            case PTR(target=target):
                records.append(PointerRecord(name=owner, ttl=ttl, target=name_text(target)))
            case SRV():
                records.append(ServiceRecord(name=owner,
                                             ttl=ttl,
                                             port=rd.port,
                                             target=name_text(rd.target),
                                             priority=rd.priority,
                                             weight=rd.weight))
            case TXT(strings=strings):
                entries = tuple(s.decode("utf-8", errors="replace") for s in strings)
                records.append(TxtRecord(name=owner, ttl=ttl, entries=entries))
            case _:
                records.append(OtherRecord(name=owner, ttl=ttl, rdtype=int(rrset.rdtype)))

    return records


def _convert_section(section: list[RRset]) -> list[Record]:
    records: list[Record] = []
    for rrset in section:
        records.extend(_convert_rrset(rrset))
    return records


def decode_response(wire: bytes) -> Response:
    """Decode a datagram into a Response.

    Raises a DNSException if the datagram cannot be parsed.
    """
    msg = dns.message.from_wire(clear_cache_flush(wire), ignore_trailing=True)

    return Response(
        is_response=bool(msg.flags & flags.QR),
        answers=_convert_section(msg.answer),
        authorities=_convert_section(msg.authority),
        additionals=_convert_section(msg.additional),
    )


# Local Variables: #
# python-indent: 4 #
# End: #
