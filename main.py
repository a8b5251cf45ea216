# main.py
import argparse
from pathlib import Path

from route_maker.app.build import build
from route_maker.domain.errors import TrackImportError
from route_maker.io.config import load_config


def run(gpx_in: Path, gpx_out: Path | None = None, *, config: Path | None = None,
        reverse: bool = False, synthetic_timestamps: bool = False) -> float:
    cfg = load_config(config) if config else None
    app = build(cfg)
    session = app.session

    session.import_track(gpx_in.read_bytes())
    if reverse:
        session.reverse()

    if gpx_out:
        text = session.export_track(include_synthetic_timestamps=synthetic_timestamps)
        gpx_out.write_text(text, encoding="utf-8")
    return session.total_distance_km()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure and rewrite a GPX track")
    parser.add_argument("gpx", type=Path, help="Path to the GPX file")
    parser.add_argument("--out", type=Path, help="Optional path to write the edited track")
    parser.add_argument("--config", type=Path, help="Optional JSON editor config")
    parser.add_argument("--reverse", action="store_true", help="Reverse the track")
    parser.add_argument(
        "--synthetic-timestamps",
        action="store_true",
        help="Add 1 m/s timestamps for consumers that require them",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    gpx_path = args.gpx.expanduser()
    if not gpx_path.exists():
        raise FileNotFoundError(f"GPX file not found: {gpx_path}")
    try:
        total_km = run(
            gpx_path,
            args.out,
            config=args.config,
            reverse=args.reverse,
            synthetic_timestamps=args.synthetic_timestamps,
        )
    except TrackImportError as exc:
        raise SystemExit(f"Could not import {gpx_path}: {exc}") from exc
    print(f"{total_km:.3f} km")


if __name__ == "__main__":
    main()
