from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import pytest


@dataclass(frozen=True, slots=True)
class BenchImage:
    name: str
    mode: int
    channels: int
    size: int
    depth: int
    rle: bool


def pytest_addoption(parser: pytest.Parser) -> None:
    g = parser.getgroup("bench")
    g.addoption("--bench-size", action="store", type=int, default=256)
    g.addoption("--bench-rounds", action="store", type=int, default=10)
    g.addoption("--bench-warmup-rounds", action="store", type=int, default=2)
    g.addoption("--bench-out", action="store", type=str, default="benchmarks/out")
    g.addoption("--bench-no-save", action="store_true", default=False)


def pytest_configure(config: pytest.Config) -> None:
    if bool(getattr(config.option, "bench_no_save", False)):
        return
    if not hasattr(config.option, "benchmark_json"):
        return
    if getattr(config.option, "benchmark_json", None) is not None:
        return

    out_dir = Path(str(getattr(config.option, "bench_out", "benchmarks/out"))).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    config.option.benchmark_json = (out_dir / f"bench_{ts}.json").open("wb")


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "bench_image" not in metafunc.fixturenames:
        return
    size = int(metafunc.config.getoption("--bench-size", default=256))
    images = [
        BenchImage("rgb8_raw", 3, 3, size, 8, False),
        BenchImage("rgb8_rle", 3, 3, size, 8, True),
        BenchImage("cmyk8_rle", 4, 4, size, 8, True),
        BenchImage("lab16_raw", 9, 3, size, 16, False),
    ]
    metafunc.parametrize("bench_image", images, ids=[i.name for i in images])
