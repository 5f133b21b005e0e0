#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 19:33:48 krylon>
#
# /data/code/python/pymdscan/test_options.py
# created on 14. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.test_options

(c) 2026 Benjamin Walkenhorst
"""

import os
import shutil
import unittest
from datetime import datetime
from typing import Any, Final

from pymdscan import common
from pymdscan.options import (BrowseOptions, ClassType, QueryType,
                              ResolveOptions, browse_domain, load_config)

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_options_%Y%m%d_%H%M%S"))


class TestOptions(unittest.TestCase):
    """Test the scan options and the configuration file."""

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        shutil.rmtree(test_dir, ignore_errors=True)

    def test_01_defaults(self) -> None:
        """Check the defaults."""
        opt = ResolveOptions(protocols="_http._tcp.local.")

        self.assertEqual(opt.protocols, ["_http._tcp.local."])
        self.assertEqual(opt.query_types, [QueryType.PTR])
        self.assertEqual(opt.class_type, ClassType.IN)
        self.assertEqual(opt.scan_time, 2.0)
        self.assertEqual(opt.retries, 2)
        self.assertFalse(opt.allow_overlapped)
        self.assertIsNone(opt.adapter)

    def test_02_invalid(self) -> None:
        """Invalid options are rejected."""
        test_cases: Final[list[dict[str, Any]]] = [
            {"protocols": []},
            {"protocols": ["_http._tcp.local.", "  "]},
            {"protocols": ["_http._tcp.local."], "query_types": []},
            {"protocols": ["_http._tcp.local."], "scan_time": -1},
            {"protocols": ["_http._tcp.local."], "retries": -1},
            {"protocols": ["_http._tcp.local."], "retry_delay": -0.5},
        ]

        for kwargs in test_cases:
            with self.assertRaises(ValueError, msg=str(kwargs)):
                ResolveOptions(**kwargs)

    def test_03_browse(self) -> None:
        """BrowseOptions turn into a PTR query for the meta domain."""
        bopt = BrowseOptions(scan_time=0.5, retries=0, adapter="eth0")
        ropt = bopt.resolve_options()

        self.assertEqual(list(ropt.protocols), [browse_domain])
        self.assertEqual(list(ropt.query_types), [QueryType.PTR])
        self.assertEqual(ropt.scan_time, 0.5)
        self.assertEqual(ropt.retries, 0)
        self.assertEqual(ropt.adapter, "eth0")

    def test_04_no_config(self) -> None:
        """A missing configuration file yields nothing."""
        self.assertEqual(load_config(os.path.join(test_dir, "missing.toml")), {})

    def test_05_load_config(self) -> None:
        """Load a configuration file."""
        with open(common.path.config, "w", encoding="utf-8") as fh:
            fh.write("""
[resolve]
protocols = ["_ipp._tcp.local."]
query_types = ["ptr", "txt", "weird"]
class_type = "any"
scan_time = 3
retries = 1
allow_overlapped = true
""")

        cfg = load_config()

        self.assertEqual(cfg["protocols"], ["_ipp._tcp.local."])
        self.assertEqual(cfg["query_types"], [QueryType.PTR, QueryType.TXT, QueryType.ANY])
        self.assertEqual(cfg["class_type"], ClassType.ANY)
        self.assertEqual(cfg["scan_time"], 3.0)
        self.assertIsInstance(cfg["scan_time"], float)
        self.assertEqual(cfg["retries"], 1)
        self.assertTrue(cfg["allow_overlapped"])

        opt = ResolveOptions(**cfg)
        self.assertEqual(opt.class_type, ClassType.ANY)

    def test_06_bad_config(self) -> None:
        """Unknown keys and bad values are errors."""
        bad: Final[list[str]] = [
            "[resolve]\nbogus = 1\n",
            "[resolve]\nclass_type = \"chaos\"\n",
        ]

        for idx, text in enumerate(bad):
            cfg_path = os.path.join(test_dir, f"bad{idx}.toml")
            with open(cfg_path, "w", encoding="utf-8") as fh:
                fh.write(text)
            with self.assertRaises(ValueError):
                load_config(cfg_path)


# Local Variables: #
# python-indent: 4 #
# End: #
