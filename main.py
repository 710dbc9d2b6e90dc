#!/usr/bin/env python3
"""
main.py – CLI for the tabulated atmosphere model.

Usage:
    python main.py --altitude 0 --altitude 10050        # bundled USSA1976 table
    python main.py --config atmosphere.json --altitude 5e4 \\
        --longitude -3.14159 --latitude -1.5708
    python main.py --table density.dat --table pressure.dat --table temperature.dat \\
        --independent longitude latitude altitude --altitude 5e4
    python main.py --sweep 0 100000 201 --output profile.csv --plot
"""

from __future__ import annotations
import argparse
import logging
import sys

from tabatmo.atmosphere import TabulatedAtmosphere
from tabatmo.config import AtmosphereConfig, build_atmosphere, load_config
from tabatmo.errors import TabulatedAtmosphereError
from tabatmo.export import export_profile_csv
from tabatmo.logging_config import setup_logging
from tabatmo.profiles import altitude_grid, sample_profile

logger = logging.getLogger("tabatmo.cli")


# ── Pretty-printing helpers ──────────────────────────────────────────

def _header():
    print()
    print("╔══════════════════════════════════════════════════════════╗")
    print("║              Tabulated Atmosphere Model                  ║")
    print("╚══════════════════════════════════════════════════════════╝")
    print()


def _print_model_summary(atm: TabulatedAtmosphere):
    print(f"  ── Model ({len(atm.axes)}-D) ──────────────────────────────────────")
    for axis in atm.axes:
        print(f"    {axis.variable.value:<12s} {len(axis):6d} breakpoints  "
              f"[{axis.lower:.6g}, {axis.upper:.6g}]")
    print(f"    variables:   {', '.join(v.value for v in atm.dependent_variables)}")
    print()


# ── Argparse ─────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Query a tabulated atmosphere",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  Point query:   python main.py --altitude 10050
  Own tables:    python main.py --table mars.dat --dependent pressure density temperature
  Sweep:         python main.py --sweep 0 86000 87 --output ussa.csv
""",
    )
    # ── Model ────────────────────────────────────────────────────
    p.add_argument('--config', type=str, default=None,
                   help='JSON config file (see tabatmo/config.py)')
    p.add_argument('--table', action='append', default=None,
                   help='Table file; repeat for multiple files (bound in order)')
    p.add_argument('--dependent', nargs='+', default=None,
                   help='Dependent variables per value column, in order')
    p.add_argument('--independent', nargs='+', default=None,
                   help='Independent variables per coordinate column, in order')
    p.add_argument('--comment', type=str, default=None,
                   help='Comment marker (default "#")')

    # ── Query point ──────────────────────────────────────────────
    p.add_argument('--altitude', type=float, action='append', default=None,
                   help='Altitude [m]; repeat for several points')
    p.add_argument('--longitude', type=float, default=0.0,
                   help='Longitude, in the table units (default 0)')
    p.add_argument('--latitude', type=float, default=0.0,
                   help='Latitude, in the table units (default 0)')
    p.add_argument('--time', type=float, default=0.0,
                   help='Time, in the table units (default 0)')
    p.add_argument('--speed-of-sound', action='store_true',
                   help='Also report the speed of sound')

    # ── Sweep / output ───────────────────────────────────────────
    p.add_argument('--sweep', nargs=3, metavar=('H_MIN', 'H_MAX', 'N'),
                   help='Altitude sweep: --sweep 0 100000 201')
    p.add_argument('--output', '--csv', type=str, default=None,
                   help='CSV output path for the sweep')
    p.add_argument('--plot', action='store_true',
                   help='Show profile plots for the sweep')
    p.add_argument('--save-plot', type=str, default=None,
                   help='Save the sweep plot to this path')

    # ── Logging ──────────────────────────────────────────────────
    p.add_argument('--log-level', type=str, default=None,
                   help='Logging level (default from config, INFO)')
    p.add_argument('--log-file', type=str, default=None,
                   help='Also write the log to this file')
    return p


def _apply_overrides(cfg: AtmosphereConfig, args) -> AtmosphereConfig:
    if args.table:
        cfg.table.files = {i: path for i, path in enumerate(args.table)}
    if args.dependent:
        cfg.table.dependent_variables = args.dependent
    if args.independent:
        cfg.table.independent_variables = args.independent
    if args.comment is not None:
        cfg.table.comment = args.comment
    if args.log_level is not None:
        cfg.logging.level = args.log_level
    if args.log_file is not None:
        cfg.logging.file = args.log_file
    return cfg


# ── Modes ────────────────────────────────────────────────────────────

def run_queries(atm: TabulatedAtmosphere, args):
    """Print every tabulated quantity at each requested altitude."""
    names = [v.value for v in atm.dependent_variables]
    if args.speed_of_sound:
        names.append('speed_of_sound')
    print("  " + "  ".join(f"{k:>14s}" for k in ['altitude'] + names))

    for h in args.altitude:
        vals = [atm.get(v, h, args.longitude, args.latitude, args.time)
                for v in atm.dependent_variables]
        if args.speed_of_sound:
            vals.append(atm.get_speed_of_sound(h, args.longitude,
                                               args.latitude, args.time))
        print("  " + "  ".join(f"{x:14.6g}" for x in [h] + vals))
    print()


def run_sweep(atm: TabulatedAtmosphere, args):
    """Altitude sweep with optional CSV export and plots."""
    lo, hi, n = float(args.sweep[0]), float(args.sweep[1]), int(args.sweep[2])
    print(f"  Sweeping altitude from {lo:g} to {hi:g} m ({n} points)...\n")

    profile = sample_profile(
        atm, altitude_grid(lo, hi, n),
        longitude=args.longitude, latitude=args.latitude, time=args.time,
        speed_of_sound=args.speed_of_sound,
    )

    if args.output:
        csv_path = export_profile_csv(profile, args.output)
        logger.debug("Wrote %d rows to %s", len(profile["altitude"]), csv_path)
        print(f"  → CSV: {csv_path}")
    if args.plot or args.save_plot:
        from tabatmo.plotting import plot_profiles
        plot_profiles(profile, show=args.plot, save_path=args.save_plot)
        if args.save_plot:
            print(f"  → Plot: {args.save_plot}")
    return profile


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = _apply_overrides(load_config(args.config), args)
        setup_logging(cfg.logging.level, cfg.logging.file)
        atm = build_atmosphere(cfg)
    except (TabulatedAtmosphereError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _header()
    _print_model_summary(atm)

    try:
        if args.altitude:
            run_queries(atm, args)
        if args.sweep:
            run_sweep(atm, args)
    except (TabulatedAtmosphereError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if not args.altitude and not args.sweep:
        print("  Nothing to do: pass --altitude or --sweep.\n")
    print("  Done.\n")
    return 0


if __name__ == '__main__':
    sys.exit(main())
