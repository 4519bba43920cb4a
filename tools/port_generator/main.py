#!/usr/bin/env python3
import argparse
import json
import sys
from pathlib import Path

from frontend import load_compile_profile
from pipeline import WorkspaceError, run_pipeline


REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_INPUT_DIR = REPO_ROOT / "Terathon-Math-Library"
DEFAULT_OUTPUT_DIR = REPO_ROOT / "Terathon-Math-Library-CSharp"


def build_parser():
    p = argparse.ArgumentParser(description="Generate the C# port of the Terathon math library")
    p.add_argument(
        "--input-dir",
        default=str(DEFAULT_INPUT_DIR),
        help="Directory scanned recursively for .h/.hpp headers (default: <repo>/Terathon-Math-Library)",
    )
    p.add_argument(
        "--output-dir",
        default=str(DEFAULT_OUTPUT_DIR),
        help="Directory receiving generated .cs files (default: <repo>/Terathon-Math-Library-CSharp)",
    )
    p.add_argument("--compile-profile", help="Optional JSON file with clang {\"args\": [...]}")
    p.add_argument("--skip-structs", action="store_true", help="Do not emit one file per type")
    p.add_argument("--skip-interfaces", action="store_true", help="Emit an empty Interfaces.cs")
    p.add_argument("--summary-out", help="Optional JSON run summary path")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    input_dir = Path(args.input_dir)

    try:
        profile = load_compile_profile(args.compile_profile, include_dir=input_dir)
        summary = run_pipeline(
            input_dir,
            Path(args.output_dir),
            compile_profile=profile,
            emit_structs=not args.skip_structs,
            emit_interfaces=not args.skip_interfaces,
        )
    except (WorkspaceError, ValueError, OSError) as err:
        print(f"port: error: {err}", file=sys.stderr)
        return 2

    if args.summary_out:
        out_path = Path(args.summary_out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(summary, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        print(f"port: wrote {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
