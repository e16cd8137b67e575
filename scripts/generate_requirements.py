#!/usr/bin/env python3
"""Generate (or verify) requirements.txt from pyproject.toml extras.

Usage::

    python scripts/generate_requirements.py          # rewrite requirements.txt
    python scripts/generate_requirements.py --check  # fail when out of sync
"""

from __future__ import annotations

import argparse
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
REQUIREMENTS = ROOT / "requirements.txt"
SYNC_EXTRAS = ("cli", "excel", "pdf")
HEADER = (
    f"# Generated from pyproject.toml (base + extras: {','.join(SYNC_EXTRAS)})\n"
    "# Do not edit manually; run: python scripts/generate_requirements.py\n"
)


def _declared() -> list[str]:
    project = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    deps = set(project.get("dependencies", []))
    for extra in SYNC_EXTRAS:
        deps.update(project.get("optional-dependencies", {}).get(extra, []))
    return sorted(dep.strip() for dep in deps if dep.strip())


def _pinned() -> set[str]:
    if not REQUIREMENTS.exists():
        return set()
    lines = REQUIREMENTS.read_text(encoding="utf-8").splitlines()
    return {line.split("#", 1)[0].strip() for line in lines} - {""}


def main() -> None:
    """Rewrite requirements.txt, or compare it against pyproject with ``--check``."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--check", action="store_true", help="Only verify sync.")
    args = parser.parse_args()

    declared = _declared()
    if args.check:
        drift = sorted(set(declared) ^ _pinned())
        if drift:
            raise SystemExit(
                "requirements.txt is out of sync with pyproject.toml:\n"
                + "\n".join(f"- {entry}" for entry in drift)
            )
        print("Dependency sync check passed.")
        return

    REQUIREMENTS.write_text(HEADER + "\n".join(declared) + "\n", encoding="utf-8")
    print(f"Wrote {len(declared)} requirements to {REQUIREMENTS.name}")


if __name__ == "__main__":
    main()
