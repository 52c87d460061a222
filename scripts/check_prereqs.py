#!/usr/bin/env python3
"""
Prerequisite checker for broadside.

Run from repo root (after activating your venv):

    python3 scripts/check_prereqs.py
"""

import random
import sys
import traceback
from pathlib import Path


def add_src_to_syspath() -> None:
    """Ensure `src/` is on sys.path so `import broadside` works from a checkout."""
    repo_root = Path(__file__).resolve().parents[1]
    src = repo_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


def header(title: str) -> None:
    print("\n" + "=" * 72)
    print(title)
    print("=" * 72)


def check_python_version() -> bool:
    header("1) Python version")
    v = sys.version_info
    print(f"Detected Python: {v.major}.{v.minor}.{v.micro}")
    ok = v >= (3, 10)
    if ok:
        print("OK: Python 3.10 or newer is available.")
    else:
        print("FAIL: Python 3.10+ required for this project.")
    return ok


def check_core_imports() -> bool:
    header("2) Core library imports (pydantic, opentelemetry)")
    libs = ["pydantic", "opentelemetry.sdk", "opentelemetry.exporter.otlp.proto.grpc"]
    all_ok = True
    for name in libs:
        try:
            __import__(name)
            print(f"OK: imported {name}")
        except Exception as exc:  # noqa: BLE001
            all_ok = False
            print(f"FAIL: could not import {name}: {exc}")
            traceback.print_exc(limit=1)
    return all_ok


def check_engine_smoke_test() -> bool:
    header("3) Engine smoke test (computer vs computer on every board size)")
    add_src_to_syspath()
    try:
        from broadside.engine import Contestant, Match

        for size in range(5, 11):
            rng = random.Random(size)
            match = Match(
                Contestant.automated("Hunter", size, "hunt-and-target", rng),
                Contestant.automated("Random", size, "random", rng),
                rng_seed=size,
            )
            match.start()
            winner = match.play_out()
            print(f"    size={size:>2} winner={winner.name:<7} turns={len(match.history)}")
        return True
    except Exception as exc:  # noqa: BLE001
        print(f"FAIL: engine smoke test failed: {exc}")
        traceback.print_exc(limit=1)
        return False


def main() -> None:
    checks = [
        ("Python version", check_python_version),
        ("Core imports", check_core_imports),
        ("Engine smoke test", check_engine_smoke_test),
    ]

    overall_ok = True
    results: list[tuple[str, bool]] = []

    for name, fn in checks:
        ok = fn()
        results.append((name, ok))
        overall_ok = overall_ok and ok

    header("Summary")
    for name, ok in results:
        status = "OK  " if ok else "FAIL"
        print(f"{status} - {name}")

    print("\n" + "=" * 72)
    if overall_ok:
        print("ALL CHECKS PASSED. Start a game with:")
        print("    broadside --strategy hunt-and-target")
    else:
        print("Some checks FAILED. Review the messages above and fix them first.")
    print("=" * 72)


if __name__ == "__main__":
    main()
