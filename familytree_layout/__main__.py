import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from familytree_layout import (
    FamilyTreeLayoutEngine,
    LayoutConfig,
    center_layout,
    check_layout,
    validate_family,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _read_json(path: str, what: str) -> Any:
    try:
        with open(path, encoding="utf-8") as fin:
            return json.load(fin)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read %s from %s: %s", what, path, exc)
        raise SystemExit(1) from exc


def _load_family(path: str) -> Dict[str, list]:
    data = _read_json(path, "family data")
    if not isinstance(data, dict):
        logger.error("Family data in %s must be an object with 'people' and 'relationships'", path)
        raise SystemExit(1)
    return {
        "people": list(data.get("people") or []),
        "relationships": list(data.get("relationships") or []),
    }


def _load_config(path: Optional[str]) -> Optional[LayoutConfig]:
    if not path:
        return None
    values = _read_json(path, "layout config")
    try:
        return LayoutConfig.from_mapping(values)
    except (TypeError, ValueError) as exc:
        logger.error("Invalid layout config in %s: %s", path, exc)
        raise SystemExit(1) from exc


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Lay out a family tree for rendering")
    parser.add_argument("path", help="JSON file with 'people' and 'relationships'")
    parser.add_argument(
        "--config",
        help="JSON file with layout constants (personWidth, spouseGap, ...)",
    )
    parser.add_argument(
        "--output",
        help="Write the layout JSON to this path instead of stdout",
    )
    parser.add_argument(
        "--center",
        action="store_true",
        help="Centre the drawing horizontally on x=0",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip the advisory family data checks",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify layout invariants and log any violation",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Loading family from %s", args.path)
    family = _load_family(args.path)
    config = _load_config(args.config)

    try:
        engine = FamilyTreeLayoutEngine(config)
        if not args.no_validate:
            for warning in validate_family(family["people"], family["relationships"]):
                logger.warning("Family data: %s", warning)
        result = engine.generate_layout(family["people"], family["relationships"])
    except ValueError as exc:
        logger.error("Malformed family records in %s: %s", args.path, exc)
        raise SystemExit(1) from exc

    if args.center:
        result = center_layout(result, engine.config)

    if args.check:
        violations = check_layout(result, family["relationships"], engine.config)
        for violation in violations:
            logger.warning("Layout check: %s", violation)
        if not violations:
            logger.info("Layout check passed")

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing layout to %s", output_path)
        output_path.write_text(payload + "\n", encoding="utf-8")
    else:
        sys.stdout.write(payload + "\n")


if __name__ == "__main__":
    main(sys.argv[1:])
