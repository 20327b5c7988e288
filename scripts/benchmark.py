import time, argparse
# Ensure project root is on PYTHONPATH so 'csv_to_mtx' is importable without installing
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import numpy as np

from csv_to_mtx.compression import GZIP, NO_COMPRESSION
from csv_to_mtx.parser import build_matrix, read_matrix_csv
from csv_to_mtx.reader import decode
from csv_to_mtx.writer import encode
from csv_to_mtx.zones import infer_zones

def build_column_csv(zones=500, density=0.2, out_csv="samples/large_column.csv", seed=0):
    rng = np.random.default_rng(seed)
    with open(out_csv, "w", encoding="utf-8", newline="") as out:
        out.write("origin,destination,value\n")
        for o in range(1, zones + 1):
            for d in range(1, zones + 1):
                if rng.random() < density:
                    out.write(f"{o},{d},{rng.random() * 100:.3f}\n")
    return out_csv

def timed(fn, *args):
    start = time.time()
    result = fn(*args)
    return time.time() - start, result

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simple benchmark: column CSV parse vs MTX encode/decode")
    parser.add_argument("--zones", type=int, default=500, help="number of zones to generate")
    parser.add_argument("--density", type=float, default=0.2, help="share of cells present in the CSV")
    args = parser.parse_args()

    print("Building column CSV with zones =", args.zones)
    csv_path = build_column_csv(args.zones, args.density)
    text = Path(csv_path).read_text(encoding="utf-8")

    parse_time, table = timed(read_matrix_csv, text)
    zones = infer_zones(table)
    fill_time, matrix = timed(build_matrix, table, zones)
    print(f"CSV parse: {parse_time:.3f}s, fill: {fill_time:.3f}s, zones={len(zones)}")

    for compression in (NO_COMPRESSION, GZIP):
        enc_time, data = timed(encode, matrix, compression)
        dec_time, back = timed(decode, data, compression)
        assert back == matrix
        print(f"{compression.name}: encode {enc_time:.3f}s, decode {dec_time:.3f}s, bytes={len(data)}")
