#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 11:07:42 krylon>
#
# /data/code/python/pymdscan/test_main.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.test_main

(c) 2026 Benjamin Walkenhorst
"""

import io
import os
import shutil
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime
from threading import Event
from typing import Final

from pymdscan import common
from pymdscan.common import ScanCancelled
from pymdscan.main import build_parser, main, run_cancellable

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_main_%Y%m%d_%H%M%S"))


class TestMain(unittest.TestCase):
    """Test the command line."""

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        shutil.rmtree(test_dir, ignore_errors=True)

    def test_01_run_cancellable(self) -> None:
        """The worker's result and errors end up with the caller."""
        self.assertEqual(run_cancellable(lambda: 42, Event()), 42)

        def fail_resolver() -> None:
            raise ScanCancelled("cancelled")

        def fail_other() -> None:
            raise RuntimeError("something broke")

        with self.assertRaises(ScanCancelled):
            run_cancellable(fail_resolver, Event())
        with self.assertRaises(RuntimeError):
            run_cancellable(fail_other, Event())

    def test_02_version(self) -> None:
        """--version prints the application's name and version."""
        out = io.StringIO()

        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            build_parser().parse_args(["--version"])

        self.assertEqual(ctx.exception.code, 0)
        self.assertIn(f"{common.AppName} {common.AppVersion}", out.getvalue())

    def test_03_browse_flag(self) -> None:
        """--browse is a flag of its own."""
        args = build_parser().parse_args(["--browse", "-t", "0.5"])

        self.assertTrue(args.browse)
        self.assertEqual(args.protocols, [])
        self.assertEqual(args.scan_time, 0.5)

    def test_04_bad_arguments(self) -> None:
        """Invalid combinations fail before anything is sent."""
        test_cases: Final[list[list[str]]] = [
            ["--browse", "_http._tcp.local."],
            ["-r", "-1", "_http._tcp.local."],
            ["-t", "-2"],
        ]

        for argv in test_cases:
            err = io.StringIO()
            with redirect_stderr(err):
                rc: int = main(["-b", test_dir] + argv)
            self.assertEqual(rc, 1, f"argv {argv}")
            self.assertIn("ValueError", err.getvalue())


# Local Variables: #
# python-indent: 4 #
# End: #
