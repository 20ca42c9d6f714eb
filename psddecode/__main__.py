from __future__ import annotations

import argparse
import sys
from pathlib import Path

from psddecode.core.decode import open_psd
from psddecode.core.errors import PSDError
from psddecode.core.types import DecodeOptions
from psddecode.io.config import get_section, load_yaml, pick_bool, pick_str
from psddecode.io.imageio import save_image, save_thumbnail
from psddecode.utils.logger import Logger


def _stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="psddecode")
    sp = p.add_subparsers(dest="cmd", required=True)

    pd = sp.add_parser("decode")
    pd.add_argument("input", type=Path)
    pd.add_argument("output", type=Path)
    pd.add_argument("--config", type=Path, default=None)
    pd.add_argument("--thumbnail", type=str, default=None)
    pd.add_argument(
        "--skip-invalid-resources",
        dest="skip_invalid_resources",
        action="store_const",
        const=True,
        default=None,
    )
    pd.add_argument("--verbose", action="store_const", const=True, default=None)

    pi = sp.add_parser("info")
    pi.add_argument("input", type=Path)
    pi.add_argument("--config", type=Path, default=None)
    pi.add_argument(
        "--skip-invalid-resources",
        dest="skip_invalid_resources",
        action="store_const",
        const=True,
        default=None,
    )
    pi.add_argument("--verbose", action="store_const", const=True, default=None)

    a = p.parse_args(argv)

    try:
        return _run(a)
    except (PSDError, OSError, ValueError) as e:
        _stderr(f"psddecode: {e}")
        return 1


def _run(a: argparse.Namespace) -> int:
    cfg_all: dict[str, object] = {}
    if a.config is not None:
        cfg_all = load_yaml(a.config)
    cfg = get_section(cfg_all, "decode")

    opts = DecodeOptions(
        skip_invalid_resources=pick_bool(
            cfg, "skip_invalid_resources", a.skip_invalid_resources, False
        )
    )
    verbose = pick_bool(cfg, "verbose", a.verbose, False)
    log = Logger(_stderr, "psddecode") if verbose else None

    psd = open_psd(a.input, options=opts, log=log)

    if a.cmd == "info":
        for k, v in psd.metadata().items():
            print(f"{k}: {v}")
        return 0

    save_image(a.output, psd.image)

    thumb_out = pick_str(cfg, "thumbnail", a.thumbnail, "")
    if thumb_out:
        if psd.resources.thumbnail is None:
            _stderr("psddecode: file has no thumbnail")
            return 1
        save_thumbnail(Path(thumb_out), psd.resources.thumbnail)
    return 0


if __name__ == "__main__":
    sys.exit(main())
