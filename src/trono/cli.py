"""
Trono CLI entrypoint.

This CLI is intended for quick local demos and debugging without a map frontend.
It delegates filtering/ranking to `trono.ranking.filters` and position smoothing
to `trono.location.stabilizer`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from trono.catalog.loader import load_pois
from trono.config.settings import Settings, get_settings
from trono.core.env import resolve_project_path
from trono.core.logging import configure_logging
from trono.core.store import FileStore
from trono.display.format import format_distance, format_price, format_rating, format_short_address
from trono.domain.models import FilterCriteria, Position
from trono.location.sources import ReplayPositionSource, WatchOptions, load_fixes
from trono.location.stabilizer import LocationStabilizer
from trono.ranking.filters import rank_with_distances


def build_store(settings: Settings) -> FileStore:
    return FileStore(resolve_project_path(settings.store.dir), enabled=settings.store.enabled)


def build_stabilizer(settings: Settings, source: ReplayPositionSource | None = None) -> LocationStabilizer:
    loc = settings.location
    return LocationStabilizer(
        build_store(settings),
        source,
        storage_key=loc.storage_key,
        threshold_m=loc.min_movement_threshold_m,
        accuracy_ratio=loc.accuracy_improvement_ratio,
        options=WatchOptions(
            enable_high_accuracy=loc.watch.enable_high_accuracy,
            maximum_age_ms=loc.watch.maximum_age_ms,
            timeout_ms=loc.watch.timeout_ms,
        ),
    )


def _criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria(
        types=args.type or (),
        is_accessible=args.accessible,
        has_baby_changer=args.baby_changer,
        has_paper=args.paper,
        has_soap=args.soap,
        has_sink=args.sink,
        is_free=args.free,
    )


def _cmd_nearby(args: argparse.Namespace) -> int:
    """Handle the `nearby` subcommand."""
    settings = get_settings()
    pois = load_pois(args.catalog or settings.catalog.path)

    reference: Position | None = None
    if args.lat is not None and args.lon is not None:
        reference = Position(latitude=float(args.lat), longitude=float(args.lon))
    elif not args.no_cached_location:
        reference = build_stabilizer(settings).get_cached_location()

    ranked = rank_with_distances(
        pois,
        _criteria_from_args(args),
        reference,
        gender_fallback=settings.ranking.gender_fallback,
    )
    if args.limit is not None:
        ranked = ranked[: int(args.limit)]

    if args.json:
        print(json.dumps([r.model_dump(mode="json") for r in ranked], ensure_ascii=False, indent=2))
        return 0

    display = settings.display
    if reference is None:
        print("No reference position; showing catalog order.")
    for i, r in enumerate(ranked, start=1):
        poi = r.poi
        distance = format_distance(r.distance_m) if r.distance_m is not None else "-"
        price = format_price(poi.price, free_label=display.free_label, currency=display.currency)
        rating = format_rating(poi.rating, vote_count=poi.vote_count, no_rating_label=display.no_rating_label)
        address = format_short_address(poi.address, display.address_placeholder)
        print(f"{i:>2}. {poi.name}  {distance:>7}  {price}  {rating}  {address}")
    return 0


def _cmd_replay(args: argparse.Namespace) -> int:
    """Run a recorded track through the stabilizer and print accepted fixes."""
    settings = get_settings()
    fixes = load_fixes(args.fixes)
    source = ReplayPositionSource(fixes)
    stabilizer = build_stabilizer(settings, source)

    accepted: list[Position] = []
    cancel = stabilizer.start_watching(accepted.append)
    if cancel is None:
        print("Position source unavailable.")
        return 1
    cancel()

    for p in accepted:
        acc = f" ±{p.accuracy:.0f}m" if p.accuracy is not None else ""
        print(f"accepted {p.latitude:.6f},{p.longitude:.6f}{acc}")
    print(f"{len(accepted)}/{len(fixes)} fixes accepted")
    return 0


def _cmd_cached_location(_: argparse.Namespace) -> int:
    settings = get_settings()
    cached = build_stabilizer(settings).get_cached_location()
    if cached is None:
        print("none")
        return 0
    print(json.dumps(cached.model_dump(exclude_none=True)))
    return 0


def _add_tristate_flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    # --NAME requires the facet, --no-NAME requires its absence, omitted = don't care.
    parser.add_argument(f"--{name}", action=argparse.BooleanOptionalAction, default=None, help=help_text)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Trono CLI."""
    parser = argparse.ArgumentParser(prog="trono")
    sub = parser.add_subparsers(dest="command", required=True)

    near = sub.add_parser("nearby", help="List verified POIs matching filters, nearest first.")
    near.add_argument("--catalog", type=str, default=None, help="POI catalog JSON (defaults to settings).")
    near.add_argument("--lat", type=float, default=None)
    near.add_argument("--lon", type=float, default=None)
    near.add_argument("--no-cached-location", action="store_true", help="Ignore the last known position.")
    near.add_argument("--type", action="append", default=[], choices=["male", "female", "unisex"])
    _add_tristate_flag(near, "accessible", "Wheelchair accessible.")
    _add_tristate_flag(near, "baby-changer", "Baby changing station.")
    _add_tristate_flag(near, "paper", "Toilet paper available.")
    _add_tristate_flag(near, "soap", "Soap available.")
    _add_tristate_flag(near, "sink", "Sink available.")
    _add_tristate_flag(near, "free", "--free for free only, --no-free for paid only.")
    near.add_argument("--limit", type=int, default=None)
    near.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    near.set_defaults(func=_cmd_nearby)

    rep = sub.add_parser("replay", help="Replay recorded fixes through the jitter filter.")
    rep.add_argument("fixes", type=str, help="JSON list of {latitude, longitude, accuracy?, timestamp?}")
    rep.set_defaults(func=_cmd_replay)

    cached = sub.add_parser("cached-location", help="Print the last known (persisted) position.")
    cached.set_defaults(func=_cmd_cached_location)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m trono.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
