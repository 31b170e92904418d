#!/usr/bin/env python3

import argparse
import json
import logging
import sys
from typing import List, Optional

from vfr_notams import config
from vfr_notams.collections.notam_list import NotamList
from vfr_notams.models.navpoint import NavPoint
from vfr_notams.models.region import GeoCircle
from vfr_notams.read_state import NotamReadState
from vfr_notams.sources.faa import FAANotamSource

logger = logging.getLogger(__name__)


def _region(args) -> GeoCircle:
    return GeoCircle(center=NavPoint(latitude=args.lat, longitude=args.lon), radius_nm=args.radius)


def show(args) -> int:
    """Print the VFR NOTAMs of a JSON file, optionally restricted to a waypoint."""
    try:
        with open(args.file) as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    notams, cancelled = NotamList.from_json(document, _region(args))
    notams = notams.cleaned(cancelled)

    read_state = NotamReadState.load(args.read_state) if args.read_state else NotamReadState()
    if args.waypoint:
        lat, lon = args.waypoint
        notams = notams.restricted(NavPoint(latitude=lat, longitude=lon, name="WPT"), read_state)

    if args.format == 'json':
        print(json.dumps(notams.to_dict(), indent=2))
    else:
        print(notams.summary())
        for notam in notams:
            marker = ' ' if read_state.is_read(notam.number) else '*'
            print(f"{marker} {notam}")

    if args.read_state and args.mark_read:
        for notam in notams:
            read_state.mark_read(notam.number)
        read_state.save(args.read_state)
    return 0


def fetch(args) -> int:
    """Download the NOTAM document for a region."""
    document = FAANotamSource().fetch(_region(args))
    with open(args.output, 'w') as f:
        json.dump(document, f)
    logger.info(f"Wrote {len(document['items'])} items to {args.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='VFR NOTAM briefing tool')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    subparsers = parser.add_subparsers(dest='command', required=True)

    def add_region_arguments(sub):
        sub.add_argument('--lat', help='Region center latitude', type=float, required=True)
        sub.add_argument('--lon', help='Region center longitude', type=float, required=True)
        sub.add_argument('--radius', help='Region radius in NM', type=float, default=100.0)

    show_parser = subparsers.add_parser('show', help='Show NOTAMs from a JSON file')
    show_parser.add_argument('file', help='NOTAM API JSON document')
    add_region_arguments(show_parser)
    show_parser.add_argument('-w', '--waypoint', help='Restrict to a waypoint', nargs=2, type=float, metavar=('LAT', 'LON'))
    show_parser.add_argument('-r', '--read-state', help='JSON file with read NOTAM numbers')
    show_parser.add_argument('-m', '--mark-read', help='Mark shown NOTAMs as read', action='store_true')
    show_parser.add_argument('--format', help='Output format', choices=['human', 'json'], default='human')
    show_parser.set_defaults(func=show)

    fetch_parser = subparsers.add_parser('fetch', help='Fetch NOTAMs from the FAA API')
    add_region_arguments(fetch_parser)
    fetch_parser.add_argument('-o', '--output', help='Output file path', required=True)
    fetch_parser.set_defaults(func=fetch)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return args.func(args)
    except ValueError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
