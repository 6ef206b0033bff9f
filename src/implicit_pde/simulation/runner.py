"""
implicit_pde/simulation/runner.py
=================================
Parameter file → case expansion → run → save, with an optional process
pool.

A parameter file is a plain ``.py`` module (or a dict) such as::

    description = "diffusion_demo"
    equation = "diffusion"          # or "schrodinger"
    T, L, dt, dx = 100.0, 100.0, 0.1, 0.1
    spread = [50.0, 150.0]          # list → swept
    method_sweep = ["thomas", "banded"]   # _sweep suffix → swept, saved as "method"

Output layout::

    results/<timestamp>_<description>/
        params.py            (copy of the parameter file, if given)
        summary.csv
        case_000/result.npz, parameters.json
        ...
"""

from __future__ import annotations

import dataclasses
import importlib.util
import itertools
import json
import os
import shutil
import time
from datetime import datetime
from multiprocessing import Pool
from typing import Any, Dict, Iterator, List, Optional, Union

import numpy as np
import pandas as pd

from implicit_pde.core.config import DiffusionConfig, SchrodingerConfig
from implicit_pde.core.propagation import PropagationResult
from implicit_pde.core.propagator import diffusion_propagation, schrodinger_propagation

# keys that are never swept, even when list-valued
FIXED_VALUE_KEYS = {"description", "equation", "outdir"}

_CONFIGS = {
    "diffusion": DiffusionConfig,
    "schrodinger": SchrodingerConfig,
}
_PROPAGATORS = {
    "diffusion": diffusion_propagation,
    "schrodinger": schrodinger_propagation,
}

# ----------------------------------------------------------------------
# helpers
# ----------------------------------------------------------------------


def _load_params(path: str) -> Dict[str, Any]:
    spec = importlib.util.spec_from_file_location("params", path)
    if spec is None or spec.loader is None:
        raise ValueError(f"cannot load parameter file: {path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    keep = (str, int, float, bool, list, tuple, dict, type(None), np.ndarray, np.generic)
    return {
        k: getattr(mod, k)
        for k in dir(mod)
        if not k.startswith("_") and isinstance(getattr(mod, k), keep)
    }


def _json_safe(obj):
    if isinstance(obj, complex):
        return {"__complex__": True, "r": obj.real, "i": obj.imag}
    if isinstance(obj, np.ndarray):
        return [_json_safe(v) for v in obj.tolist()]
    if isinstance(obj, (list, tuple)):
        return [_json_safe(v) for v in obj]
    if isinstance(obj, dict):
        return {str(k): _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, np.generic):
        return _json_safe(obj.item())
    return obj


def _sweep_values(key: str, value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, np.ndarray)):
        return list(value)
    raise ValueError(
        f"{key!r} must be a list, tuple or array of values to sweep, got {type(value).__name__}"
    )


def _is_sweep(key: str, value: Any) -> bool:
    if key in FIXED_VALUE_KEYS:
        return False
    if key.endswith("_sweep"):
        return True
    return isinstance(value, (list, tuple, np.ndarray)) and len(value) > 1


def _expand_cases(base: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """
    Cartesian product over swept entries.

    * list / tuple / ndarray with more than one element → swept
    * key ending in ``_sweep`` → swept, suffix stripped
    * single-element list → fixed to that element

    A ``_sweep`` key whose value is not a list, tuple or array raises
    ValueError.
    """
    fixed: Dict[str, Any] = {}
    sweep_keys: List[str] = []
    sweep_vals: List[List[Any]] = []
    for k, v in base.items():
        if _is_sweep(k, v):
            sweep_keys.append(k[: -len("_sweep")] if k.endswith("_sweep") else k)
            sweep_vals.append(_sweep_values(k, v))
        elif isinstance(v, (list, tuple)) and len(v) == 1 and k not in FIXED_VALUE_KEYS:
            fixed[k] = v[0]
        else:
            fixed[k] = v

    if not sweep_keys:
        yield dict(fixed)
        return
    for combo in itertools.product(*sweep_vals):
        case = dict(fixed)
        case.update(zip(sweep_keys, combo))
        yield case


def _make_root(desc: str, base: str = "results") -> str:
    now = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    root = os.path.join(base, f"{now}_{desc}")
    os.makedirs(root, exist_ok=True)
    return root


def _build_config(p: Dict[str, Any]) -> Union[DiffusionConfig, SchrodingerConfig]:
    equation = p.get("equation", "diffusion")
    if equation not in _CONFIGS:
        raise ValueError(f"Unknown equation: {equation!r} (expected one of {sorted(_CONFIGS)})")
    cls = _CONFIGS[equation]
    names = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in p.items() if k in names})


def _summarize(p: Dict[str, Any], result: PropagationResult) -> Dict[str, Any]:
    field_t = result.history
    row: Dict[str, Any] = {
        k: v for k, v in p.items() if isinstance(v, (str, int, float, bool))
    }
    row["Nx"] = field_t.shape[1]
    row["Nt"] = field_t.shape[0]
    row["max_abs_initial"] = float(np.max(np.abs(field_t[0])))
    row["max_abs_final"] = float(np.max(np.abs(field_t[-1])))
    if p.get("equation") == "schrodinger":
        try:
            n0, n1 = result.norm(0), result.norm(-1)
        except ValueError:
            # even number of grid points: Simpson's rule does not apply
            n0 = n1 = float("nan")
        row["norm_initial"] = n0
        row["norm_final"] = n1
        row["norm_drift"] = abs(n1 - n0)
    return row


# ----------------------------------------------------------------------
# single case
# ----------------------------------------------------------------------


def _run_one(p: Dict[str, Any], outdir: Optional[str], save: bool) -> Dict[str, Any]:
    config = _build_config(p)
    propagate = _PROPAGATORS[p.get("equation", "diffusion")]
    result = propagate(
        config,
        method=p.get("method", "thomas"),
        pivot_tol=p.get("pivot_tol"),
        verbose=bool(p.get("verbose", False)),
    )

    if save and outdir is not None:
        os.makedirs(outdir, exist_ok=True)
        arrays = dict(x=result.x, t=result.t, field=result.history)
        if result.potential is not None:
            arrays["potential"] = result.potential
        np.savez_compressed(os.path.join(outdir, "result.npz"), **arrays)
        with open(os.path.join(outdir, "parameters.json"), "w") as f:
            json.dump(_json_safe({**p, **config.to_dict()}), f, indent=2)

    return _summarize(p, result)


def _run_one_star(args):
    return _run_one(*args)


# ----------------------------------------------------------------------
# batch
# ----------------------------------------------------------------------


def run_all(
    params: Union[str, Dict[str, Any]],
    *,
    nproc: int = 1,
    save: bool = True,
    dry_run: bool = False,
    verbose: bool = False,
):
    """
    Expand ``params`` into cases and run them.

    Parameters
    ----------
    params : str or dict
        Path to a parameter ``.py`` file or a parameter dict
    nproc : int
        Number of worker processes (1 → sequential)
    save : bool
        Write result.npz / parameters.json per case and summary.csv
    dry_run : bool
        Only expand the cases; nothing is computed or written
    verbose : bool
        Print progress

    Returns
    -------
    list of dict or pandas.DataFrame
        The expanded cases for ``dry_run``, otherwise the summary table
    """
    param_path = params if isinstance(params, str) else None
    base = _load_params(params) if isinstance(params, str) else dict(params)
    cases = list(_expand_cases(base))
    if verbose:
        print(f"{len(cases)} case(s) from {param_path or 'dict'}")
    if dry_run:
        return cases

    root = None
    if save:
        root = base.get("outdir") or _make_root(base.get("description", "run"))
        os.makedirs(root, exist_ok=True)
        if param_path is not None:
            shutil.copy(param_path, os.path.join(root, "params.py"))

    inputs = [
        (case, os.path.join(root, f"case_{i:03d}") if root else None, save)
        for i, case in enumerate(cases)
    ]

    t0 = time.perf_counter()
    if nproc > 1:
        with Pool(min(nproc, len(inputs))) as pool:
            rows = pool.map(_run_one_star, inputs)
    else:
        rows = [_run_one(*inp) for inp in inputs]

    summary = pd.DataFrame(rows)
    if root is not None:
        summary.to_csv(os.path.join(root, "summary.csv"), index=False)
    if verbose:
        print(f"Finished {len(rows)} case(s) in {time.perf_counter() - t0:.1f}s")
    return summary


# ----------------------------------------------------------------------
# CLI
# ----------------------------------------------------------------------
def main(argv=None):
    import argparse

    ap = argparse.ArgumentParser(description="Run implicit 1-D PDE cases from a parameter file")
    ap.add_argument("paramfile", help="parameter .py file")
    ap.add_argument("-n", "--nproc", type=int, default=1, help="number of worker processes")
    ap.add_argument("--dry-run", action="store_true", help="only list the expanded cases")
    ap.add_argument("--no-save", action="store_true", help="do not write results")
    args = ap.parse_args(argv)

    out = run_all(
        args.paramfile,
        nproc=args.nproc,
        save=not args.no_save,
        dry_run=args.dry_run,
        verbose=True,
    )
    if args.dry_run:
        for i, case in enumerate(out):
            print(f"case_{i:03d}: {case}")
    else:
        print(out.to_string(index=False))


if __name__ == "__main__":
    main()
