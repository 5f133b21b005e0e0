#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 14:21:37 krylon>
#
# /data/code/python/pymdscan/model.py
# created on 12. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.model

(c) 2026 Benjamin Walkenhorst

Data types for the discovery results, and the record variants the codec
hands to the mapper.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Optional, Union


@dataclass(slots=True, kw_only=True, frozen=True)
class Service:
    """Service is a service offered by a Host."""

    name: str
    port: int
    ttl: int

    def __str__(self) -> str:
        return f"Service: {self.name} Port: {self.port}, TTL: {self.ttl}"


@dataclass(slots=True, kw_only=True)
class TextRecord:
    """TextRecord holds the key/value pairs of a TXT record."""

    name: str
    ttl: int
    properties: dict[str, Optional[str]] = field(default_factory=dict)

    def add_property(self, key: str, value: Optional[str]) -> None:
        """Add a property. Keys must be non-empty and unique within the record."""
        if key is None or key == "":
            raise ValueError("TextRecord property key must not be empty")
        if key in self.properties:
            raise ValueError(f"TextRecord {self.name} already has a property {key}")
        self.properties[key] = value

    def copy(self) -> 'TextRecord':
        """Return an independent copy of the TextRecord."""
        return TextRecord(name=self.name, ttl=self.ttl, properties=dict(self.properties))

    def __str__(self) -> str:
        lines: list[str] = [f"Text: {self.name}, TTL: {self.ttl}, PropertySets: {len(self.properties)}"]
        for key, val in self.properties.items():
            lines.append(f"    {key} = {val if val is not None else ''}")
        return "\n".join(lines)


@dataclass(slots=True, kw_only=True, eq=False)
class Host:
    """Host is a participant on the local network that answered our query.

    Two Hosts are considered equal if their ID and primary address match.
    """

    host_id: Optional[str] = None
    display_name: Optional[str] = None
    addresses: list[str] = field(default_factory=list)
    domain_names: list[str] = field(default_factory=list)
    services: dict[str, Service] = field(default_factory=dict)
    text_records: dict[str, TextRecord] = field(default_factory=dict)

    @property
    def address(self) -> Optional[str]:
        """Return the Host's primary address, if it has any."""
        return self.addresses[0] if self.addresses else None

    @property
    def domain_name(self) -> Optional[str]:
        """Return the first domain name, if any."""
        return self.domain_names[0] if self.domain_names else None

    @property
    def text_record(self) -> Optional[TextRecord]:
        """Return the first TextRecord, if any."""
        for rec in self.text_records.values():
            return rec
        return None

    def add_address(self, addr: str) -> None:
        """Append an address unless we know it already."""
        if addr not in self.addresses:
            self.addresses.append(addr)

    def add_domain_name(self, name: str) -> None:
        """Append a domain name unless we know it already."""
        if name is None:
            raise ValueError("domain name must not be None")
        if name not in self.domain_names:
            self.domain_names.append(name)

    def add_service(self, svc: Service) -> None:
        """Register a Service, replacing one of the same name."""
        if svc is None:
            raise ValueError("Service must not be None")
        self.services[svc.name] = svc

    def add_text_record(self, rec: TextRecord) -> None:
        """Register a TextRecord, replacing one of the same name."""
        if rec is None:
            raise ValueError("TextRecord must not be None")
        self.text_records[rec.name] = rec

    def merge(self, other: 'Host') -> None:
        """Fold <other> into this Host.

        ID and display name are only taken over if we have none, yet, addresses
        and domain names accumulate, services and text records of the same
        name are replaced.
        """
        if self.host_id is None:
            self.host_id = other.host_id
        if self.display_name is None:
            self.display_name = other.display_name
        for addr in other.addresses:
            self.add_address(addr)
        for name in other.domain_names:
            self.add_domain_name(name)
        for svc in other.services.values():
            self.add_service(svc)
        for rec in other.text_records.values():
            self.add_text_record(rec.copy())

    def copy(self) -> 'Host':
        """Return an independent copy of the Host."""
        return Host(
            host_id=self.host_id,
            display_name=self.display_name,
            addresses=list(self.addresses),
            domain_names=list(self.domain_names),
            services=dict(self.services),
            text_records={k: v.copy() for k, v in self.text_records.items()},
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Host):
            return NotImplemented
        return self.host_id == other.host_id and self.address == other.address

    def __hash__(self) -> int:
        return hash((self.host_id, self.address))

    def __str__(self) -> str:
        lines: list[str] = [
            f"Id: {self.host_id}, DisplayName: {self.display_name}, "
            f"IPs: {', '.join(self.addresses)}, Services: {len(self.services)}"
        ]
        for svc in self.services.values():
            lines.append(f"  {svc}")
        for rec in self.text_records.values():
            lines.append(f"  {rec}")
        return "\n".join(lines)


class RecordKind(Enum):
    """RecordKind tells the mapper what facet of a Host a record describes."""

    Address = auto()
    Pointer = auto()
    Service = auto()
    Text = auto()
    Other = auto()


@dataclass(slots=True, kw_only=True, frozen=True)
class AddressRecord:
    """An A record."""

    kind: ClassVar[RecordKind] = RecordKind.Address

    name: str
    ttl: int
    address: str


@dataclass(slots=True, kw_only=True, frozen=True)
class PointerRecord:
    """A PTR record."""

    kind: ClassVar[RecordKind] = RecordKind.Pointer

    name: str
    ttl: int
    target: str


@dataclass(slots=True, kw_only=True, frozen=True)
class ServiceRecord:
    """An SRV record."""

    kind: ClassVar[RecordKind] = RecordKind.Service

    name: str
    ttl: int
    port: int
    target: str = ""
    priority: int = 0
    weight: int = 0


@dataclass(slots=True, kw_only=True, frozen=True)
class TxtRecord:
    """A TXT record, its character strings already decoded."""

    kind: ClassVar[RecordKind] = RecordKind.Text

    name: str
    ttl: int
    entries: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class OtherRecord:
    """Any record we have no use for."""

    kind: ClassVar[RecordKind] = RecordKind.Other

    name: str
    ttl: int
    rdtype: int


Record = Union[AddressRecord, PointerRecord, ServiceRecord, TxtRecord, OtherRecord]


@dataclass(slots=True, kw_only=True)
class Response:
    """Response is a decoded mDNS message."""

    is_response: bool
    answers: list[Record] = field(default_factory=list)
    authorities: list[Record] = field(default_factory=list)
    additionals: list[Record] = field(default_factory=list)

    @property
    def records(self) -> list[Record]:
        """Return the records of all sections, answers first."""
        return self.answers + self.authorities + self.additionals

    @property
    def pointers(self) -> list[PointerRecord]:
        """Return all PTR records."""
        return [r for r in self.records if isinstance(r, PointerRecord)]

    def first(self, kind: RecordKind) -> Optional[Record]:
        """Return the first record of the given kind, or None."""
        for rec in self.records:
            if rec.kind == kind:
                return rec
        return None


# Local Variables: #
# python-indent: 4 #
# End: #
