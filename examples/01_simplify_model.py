import argparse
import logging

from meshlod import extent, process
from meshlod.io.trimesh_bridge import load_mesh_buffers, to_trimesh

# ----------------------------
# 1) Args
# ----------------------------
parser = argparse.ArgumentParser(description="Build a simplified stand-in for a GLB/OBJ/STL model.")
parser.add_argument("path")
parser.add_argument("--out", default="simplified.glb")
parser.add_argument("--ratio", type=float, default=0.5)
parser.add_argument("--height", type=float, default=None)
parser.add_argument("--step", type=int, default=2500)
args = parser.parse_args()

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# ----------------------------
# 2) Load -> merge -> decimate -> normalize
# ----------------------------
parts = load_mesh_buffers(args.path)
res = process(
    parts,
    simplification_ratio=args.ratio,
    target_height=args.height,
    max_faces_per_step=args.step,
    step_callback=lambda g: print(f"  ... {g.n_faces} faces"),
)

# ----------------------------
# 3) Report + export
# ----------------------------
for k, v in res.summary().items():
    print(f"{k:>20}: {v}")
print("height check:", res.baseline_height, extent(res.simplified_mesh).height)

to_trimesh(res.simplified_mesh).export(args.out)
print(f"[OK] Wrote {args.out}")
