#!/usr/bin/env python3
"""
mpdump_check.py - golden vector checker for mpdump

Usage:
  python scripts/mpdump_check.py              # runs over tests/vectors
  python scripts/mpdump_check.py <file.hex>   # dumps a single hex vector
Exits non-zero on failure.

Vector layout:
  tests/vectors/valid/NAME.hex    input bytes as hex (whitespace ignored)
  tests/vectors/valid/NAME.txt    exact expected output
  tests/vectors/invalid/NAME.hex  input that must be rejected
  tests/vectors/invalid/NAME.err  optional: expected start of the error message
"""

import sys, os, glob, re, binascii, pathlib

# Local import when running from repo root
REPO = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO / "impl" / "python" / "mpdump"))
from mpdump import Error, render  # type: ignore


def parse_hex_file(path: str) -> bytes:
    s = open(path, 'r', encoding='utf-8').read()
    hex_str = re.sub(r'[^0-9A-Fa-f]', '', s)
    if len(hex_str) % 2 != 0:
        raise ValueError("odd hex length in " + path)
    return binascii.unhexlify(hex_str)


def sibling(path: str, ext: str) -> str:
    return os.path.splitext(path)[0] + ext


def run_vectors(root: str) -> int:
    ok = 0; bad = 0
    valid = sorted(glob.glob(os.path.join(root, "valid", "*.hex")))
    invalid = sorted(glob.glob(os.path.join(root, "invalid", "*.hex")))
    # valid: must dump to exactly the expected text
    for p in valid:
        name = os.path.basename(p)
        expected_path = sibling(p, ".txt")
        if not os.path.exists(expected_path):
            print(f"[FAIL] missing expected output for {name}")
            bad += 1
            continue
        expected = pathlib.Path(expected_path).read_bytes()
        try:
            out = render(parse_hex_file(p))
        except Error as e:
            print(f"[FAIL] valid vector rejected: {name} -> {e}")
            bad += 1
            continue
        if out != expected:
            print(f"[FAIL] output mismatch: {name}")
            bad += 1
        else:
            ok += 1
    # invalid: must be rejected, with the expected message when one is given
    for p in invalid:
        name = os.path.basename(p)
        try:
            render(parse_hex_file(p))
            print(f"[FAIL] invalid vector accepted: {name}")
            bad += 1
            continue
        except Error as e:
            err = str(e)
        err_path = sibling(p, ".err")
        if os.path.exists(err_path):
            want = pathlib.Path(err_path).read_text(encoding="utf-8").strip()
            if not err.startswith(want):
                print(f"[FAIL] wrong error for {name}: {err!r}, expected {want!r}")
                bad += 1
                continue
        ok += 1
    print(f"\nSummary: {ok} ok, {bad} failed")
    return 1 if bad else 0


def main():
    if len(sys.argv) == 2 and sys.argv[1].endswith(".hex"):
        b = parse_hex_file(sys.argv[1])
        try:
            out = render(b)
        except Error as e:
            print(f"Rejected: {e}")
            sys.exit(1)
        sys.stdout.buffer.write(out)
        sys.exit(0)
    root = os.path.join(str(REPO), "tests", "vectors")
    sys.exit(run_vectors(root))


if __name__ == "__main__":
    main()
