#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 17:52:36 krylon>
#
# /data/code/python/pymdscan/main.py
# created on 15. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyMDScan mDNS resolver. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pymdscan.main

(c) 2026 Benjamin Walkenhorst
"""


import argparse
import logging
import pathlib
import sys
from threading import Event, Thread
from typing import Any, Callable, Final, Optional

from pymdscan import common
from pymdscan.common import ResolverError
from pymdscan.model import Host
from pymdscan.options import (BrowseOptions, ClassType, QueryType,
                              ResolveOptions, load_config)
from pymdscan.resolver import Resolver

scan_keys: Final[frozenset[str]] = frozenset({"scan_time", "retries", "retry_delay",
                                               "allow_overlapped", "adapter"})


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    argp: argparse.ArgumentParser = argparse.ArgumentParser(
        prog=common.AppName.lower(),
        description="Look for hosts and services on the local network via mDNS")
    argp.add_argument("protocols",
                      nargs="*",
                      help="The service types to resolve, e.g. _http._tcp.local. "
                      "Without any, list the service types on the network instead.")
    argp.add_argument("-t", "--scan-time",
                      type=float,
                      help="How many seconds to listen for responses per attempt")
    argp.add_argument("-r", "--retries",
                      type=int,
                      help="How many times to retry the query if no one answers")
    argp.add_argument("-d", "--retry-delay",
                      type=float,
                      help="How many seconds to wait between attempts")
    argp.add_argument("-a", "--adapter",
                      help="Only use the network adapter with this name or address")
    argp.add_argument("-o", "--overlap",
                      action="store_true",
                      default=None,
                      help="Allow this scan to overlap with other scans")
    argp.add_argument("-q", "--query-types",
                      help="Comma-separated list of record types to ask for (ptr, srv, txt, any)")
    argp.add_argument("--class",
                      dest="class_type",
                      choices=["in", "any"],
                      help="The record class to ask for")
    argp.add_argument("--browse",
                      action="store_true",
                      help="List the service types on the network (the default without protocols)")
    argp.add_argument("-b", "--basedir",
                      type=pathlib.Path,
                      default=common.path.base(),
                      help="Directory to store application data in")
    argp.add_argument("-v", "--verbose",
                      action="store_true",
                      help="Print log messages to the terminal")
    argp.add_argument("--version",
                      action="version",
                      version=f"{common.AppName} {common.AppVersion}")
    return argp


def run_cancellable(target: Callable[[], Any], cancel: Event) -> Any:
    """Run <target> in a thread, set <cancel> if the user hits Ctrl-C.

    Whatever <target> raises is raised again in the caller's thread.
    """
    result: dict[str, Any] = {}

    def worker() -> None:
        try:
            result["value"] = target()
        except Exception as err:  # pylint: disable-msg=W0718
            result["error"] = err

    t = Thread(target=worker, name="scan", daemon=True)
    t.start()
    try:
        while t.is_alive():
            t.join(0.5)
    except KeyboardInterrupt:
        print("Cancelling scan...", file=sys.stderr)
        cancel.set()
        t.join()

    if "error" in result:
        raise result["error"]
    return result.get("value")


def print_hosts(hosts: dict[str, Host]) -> None:
    """Print the Hosts we found."""
    if not hosts:
        print("No hosts found.")
        return
    for key in sorted(hosts):
        print(f"{key}\n{hosts[key]}\n")


def print_domains(domains: dict[str, list[str]]) -> None:
    """Print the service types we found."""
    if not domains:
        print("No service types found.")
        return
    for dom in sorted(domains):
        print(f"{dom}: {', '.join(domains[dom])}")


def main(argv: Optional[list[str]] = None) -> int:
    """Parse the command line and run a scan."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        common.log_level_tty = logging.DEBUG
    common.set_basedir(args.basedir)

    res: Resolver = Resolver()
    cancel: Event = Event()

    try:
        cfg: dict[str, Any] = load_config()
        overrides: dict[str, Any] = {
            "scan_time": args.scan_time,
            "retries": args.retries,
            "retry_delay": args.retry_delay,
            "adapter": args.adapter,
            "allow_overlapped": args.overlap,
        }
        if args.query_types:
            overrides["query_types"] = [QueryType.parse(x) for x in args.query_types.split(",")]
        if args.class_type:
            overrides["class_type"] = ClassType[args.class_type.upper()]
        cfg.update({k: v for k, v in overrides.items() if v is not None})

        if args.browse and args.protocols:
            raise ValueError("--browse does not take any protocols")

        if args.protocols:
            cfg["protocols"] = args.protocols
            opt = ResolveOptions(**cfg)
            hosts = run_cancellable(lambda: res.resolve(opt, cancel), cancel)
            print_hosts(hosts or {})
        else:
            bopt = BrowseOptions(**{k: v for k, v in cfg.items() if k in scan_keys})
            domains = run_cancellable(lambda: res.browse_domains(bopt, cancel), cancel)
            print_domains(domains or {})
    except (ResolverError, ValueError) as err:
        print(f"{err.__class__.__name__}: {err}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

# Local Variables: #
# python-indent: 4 #
# End: #
