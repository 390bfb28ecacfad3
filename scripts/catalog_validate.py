from __future__ import annotations

import argparse

from trono.catalog.loader import audit_pois, load_pois
from trono.core.env import resolve_project_path


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Validate a Trono POI catalog snapshot (offline).")
    p.add_argument("--catalog", type=str, default="data/pois.json")
    args = p.parse_args(argv)

    catalog_path = resolve_project_path(args.catalog)
    if not catalog_path.exists():
        print("Catalog not found:", catalog_path)
        return 2

    audit = audit_pois(load_pois(catalog_path))

    print("Catalog:", catalog_path)
    print("POIs:", audit.total)
    print("Pending moderation (unverified):", audit.unverified)
    if audit.duplicate_ids:
        print("Duplicate ids:", len(audit.duplicate_ids), "example:", ", ".join(audit.duplicate_ids[:8]))
    if audit.price_mismatches:
        print("is_free disagrees with price:", len(audit.price_mismatches), "example:", ", ".join(audit.price_mismatches[:8]))
    if audit.rated_without_votes:
        print("Rating with zero votes:", len(audit.rated_without_votes), "example:", ", ".join(audit.rated_without_votes[:8]))

    return 0 if audit.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
