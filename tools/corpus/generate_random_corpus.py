#!/usr/bin/env python3
"""
Generate deterministic randomized MessagePack byte streams with the msgpack
library, to seed a fuzz corpus and for differential runs against mpdump.
Each file holds one or more concatenated top-level values.
"""
import random, binascii, argparse, pathlib
from typing import Any

import msgpack

ALPH = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_ "

def rand_str(rng: random.Random, max_len: int = 40) -> str:
    # Lengths up to 40 cross the fixstr/str8 boundary at 31
    n = rng.randint(0, max_len)
    s = "".join(rng.choice(ALPH) for _ in range(n))
    # Occasionally inject some Unicode
    if n > 0 and rng.random() < 0.2:
        s += rng.choice(["é", "ç", "ß", "Ω", "中", "𝄞"])
    return s

def rand_bytes(rng: random.Random, max_bytes: int = 24) -> bytes:
    n = rng.randint(0, max_bytes)
    return bytes(rng.getrandbits(8) for _ in range(n))

def rand_int(rng: random.Random) -> int:
    lo, hi = -(1<<63), (1<<64)-1
    # Bias towards fixints and width boundaries, but include edges
    bucket = rng.random()
    if bucket < 0.05: return lo
    if bucket < 0.10: return hi
    if bucket < 0.30: return rng.choice([-33, -32, -1, 0, 127, 128, 255, 256, 65535, 65536, (1<<32)-1, 1<<32])
    if bucket < 0.60: return rng.randint(-256, 256)
    return rng.randint(lo, hi)

def rand_ext(rng: random.Random) -> msgpack.ExtType:
    # fixext sizes plus a few that need ext8
    n = rng.choice([1, 2, 4, 8, 16, 0, 3, 20])
    return msgpack.ExtType(rng.randint(0, 127), bytes(rng.getrandbits(8) for _ in range(n)))

def rand_value(rng: random.Random, depth: int = 0) -> Any:
    if depth > 3:
        # cap nesting
        choices = ["nil", "bool", "int", "float", "str", "bin", "ext"]
    else:
        choices = ["nil", "bool", "int", "float", "str", "bin", "ext", "arr", "map"]
    k = rng.choice(choices)
    if k == "nil":
        return None
    if k == "bool":
        return bool(rng.getrandbits(1))
    if k == "int":
        return rand_int(rng)
    if k == "float":
        return rng.uniform(-1e6, 1e6)
    if k == "str":
        return rand_str(rng)
    if k == "bin":
        return rand_bytes(rng)
    if k == "ext":
        return rand_ext(rng)
    if k == "arr":
        # sometimes past 15 elements, so array16 shows up
        n = rng.choice([0, 1, 2, 3, 4, 17])
        return [rand_value(rng, depth+1) for _ in range(n)]
    if k == "map":
        n = rng.randint(0, 4)
        m = {}
        for _ in range(n):
            key = rand_str(rng, 12) if rng.random() < 0.8 else rand_int(rng)
            m[key] = rand_value(rng, depth+1)
        return m
    raise AssertionError("unreachable")

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=1337)
    ap.add_argument("-n", "--count", type=int, default=128)
    ap.add_argument("--max-values", type=int, default=3, help="top-level values per file")
    ap.add_argument("-o", "--outdir", type=str, required=True)
    args = ap.parse_args()

    rng = random.Random(args.seed)
    outdir = pathlib.Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    for i in range(args.count):
        values = [rand_value(rng, 0) for _ in range(rng.randint(1, args.max_values))]
        b = b"".join(msgpack.packb(v, use_bin_type=True) for v in values)
        h = binascii.hexlify(b[:16]).decode("ascii")
        p = outdir / f"generated_{i:04d}_{h}.msgpack"
        with open(p, "wb") as f:
            f.write(b)

    print(f"wrote {args.count} seeds to {outdir}")

if __name__ == "__main__":
    main()
