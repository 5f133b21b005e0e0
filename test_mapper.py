#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 19:10:37 krylon>
#
# /data/code/python/pymdscan/test_mapper.py
# created on 14. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.test_mapper

(c) 2026 Benjamin Walkenhorst
"""

import unittest
from typing import Final

from pymdscan.mapper import (first_label, parse_text_entries,
                             response_to_host, sender_key)
from pymdscan.model import (AddressRecord, Host, PointerRecord, Response,
                            ServiceRecord, TextRecord, TxtRecord)

sender: Final[str] = "192.168.1.20"


class TestTextEntries(unittest.TestCase):
    """Test parsing TXT entries."""

    def test_01_entries(self) -> None:
        """Parse the usual kinds of entries."""
        test_cases: Final[list[tuple[tuple[str, ...], dict]]] = [
            (("a=1", "b=2"), {"a": "1", "b": "2"}),
            (("flag",), {"flag": None}),
            (("empty=",), {"empty": ""}),
            (("url=http://x/?q=1",), {"url": "http://x/?q=1"}),
            (("nul=abc\0\0",), {"nul": "abc"}),
            (("", "=orphan", "k=v"), {"k": "v"}),
        ]

        for entries, expected in test_cases:
            rec = TextRecord(name="x.local", ttl=1)
            parse_text_entries(rec, entries)
            self.assertEqual(rec.properties, expected, f"entries {entries}")

    def test_02_duplicate(self) -> None:
        """A key that appears twice makes the record invalid."""
        rec = TextRecord(name="x.local", ttl=1)
        with self.assertRaises(ValueError):
            parse_text_entries(rec, ("a=1", "a=2"))


class TestMapper(unittest.TestCase):
    """Test turning Responses into Hosts."""

    def test_01_first_label(self) -> None:
        """Cut a name at the first dot."""
        self.assertEqual(first_label("printer._ipp._tcp.local"), "printer")
        self.assertEqual(first_label("plain"), "plain")
        self.assertEqual(first_label(""), "")

    def test_02_full_response(self) -> None:
        """A response carrying everything."""
        resp = Response(
            is_response=True,
            answers=[
                PointerRecord(name="_ipp._tcp.local", ttl=4500, target="printer._ipp._tcp.local"),
                ServiceRecord(name="printer._ipp._tcp.local", ttl=120, port=631),
                TxtRecord(name="printer._ipp._tcp.local", ttl=4500, entries=("rp=ipp", "Color")),
                AddressRecord(name="printer.local", ttl=120, address="10.0.0.5"),
            ],
            additionals=[
                AddressRecord(name="printer.local", ttl=120, address="10.0.0.6"),
                AddressRecord(name="printer.local", ttl=120, address="10.0.0.5"),
            ])

        host: Host = response_to_host(resp, sender)

        self.assertEqual(host.host_id, "10.0.0.5")
        self.assertEqual(host.display_name, "printer")
        self.assertEqual(host.addresses, ["10.0.0.5", "10.0.0.6"])
        self.assertEqual(host.domain_names, ["printer._ipp._tcp.local"])
        self.assertEqual(len(host.services), 1)
        self.assertEqual(host.services["printer._ipp._tcp.local"].port, 631)
        self.assertIsNotNone(host.text_record)
        self.assertEqual(host.text_record.properties,  # type: ignore
                         {"rp": "ipp", "Color": None})

    def test_03_id_fallback(self) -> None:
        """Without an A record, the sender's address is the ID."""
        resp = Response(is_response=True,
                        answers=[ServiceRecord(name="nas._smb._tcp.local", ttl=120, port=445)])

        host: Host = response_to_host(resp, sender)

        self.assertEqual(host.host_id, sender)
        self.assertEqual(host.addresses, [])
        self.assertEqual(host.display_name, "nas")

    def test_04_display_name(self) -> None:
        """The display name comes from PTR, then SRV, then TXT."""
        ptr = PointerRecord(name="_http._tcp.local", ttl=1, target="alpha._http._tcp.local")
        srv = ServiceRecord(name="beta._http._tcp.local", ttl=1, port=80)
        txt = TxtRecord(name="gamma._http._tcp.local", ttl=1, entries=("a=b",))

        test_cases: Final[list[tuple[list, str]]] = [
            ([txt, srv, ptr], "alpha"),
            ([txt, srv], "beta"),
            ([txt], "gamma"),
        ]

        for answers, name in test_cases:
            host = response_to_host(Response(is_response=True, answers=answers), sender)
            self.assertEqual(host.display_name, name)

        empty = response_to_host(Response(is_response=True), sender)
        self.assertIsNone(empty.display_name)

    def test_05_first_only(self) -> None:
        """Only the first SRV and TXT records count."""
        resp = Response(
            is_response=True,
            answers=[
                ServiceRecord(name="one._http._tcp.local", ttl=1, port=80),
                ServiceRecord(name="two._http._tcp.local", ttl=1, port=8080),
                TxtRecord(name="one._http._tcp.local", ttl=1, entries=("a=1",)),
                TxtRecord(name="two._http._tcp.local", ttl=1, entries=("b=2",)),
            ])

        host: Host = response_to_host(resp, sender)

        self.assertEqual(list(host.services), ["one._http._tcp.local"])
        self.assertEqual(list(host.text_records), ["one._http._tcp.local"])
        self.assertEqual(host.domain_names, ["one._http._tcp.local"])

    def test_06_multiple_pointers(self) -> None:
        """Every PTR target becomes a domain name, the first names the Host."""
        resp = Response(
            is_response=True,
            answers=[
                PointerRecord(name="_http._tcp.local", ttl=1, target="first._http._tcp.local"),
                PointerRecord(name="_http._tcp.local", ttl=1, target="second._http._tcp.local"),
            ])

        host: Host = response_to_host(resp, sender)

        self.assertEqual(host.display_name, "first")
        self.assertEqual(host.domain_names,
                         ["first._http._tcp.local", "second._http._tcp.local"])

    def test_07_sender_key(self) -> None:
        """Keys combine the sender with the instance name."""
        with_ptr = Response(
            is_response=True,
            answers=[PointerRecord(name="_http._tcp.local", ttl=1, target="web._http._tcp.local")])
        with_srv = Response(
            is_response=True,
            answers=[ServiceRecord(name="web._http._tcp.local", ttl=1, port=80)])
        bare = Response(is_response=True)

        for resp in (with_ptr, with_srv):
            host = response_to_host(resp, sender)
            self.assertEqual(sender_key(sender, resp, host), f"{sender}: web")

        self.assertEqual(sender_key(sender, bare, response_to_host(bare, sender)), sender)


# Local Variables: #
# python-indent: 4 #
# End: #
