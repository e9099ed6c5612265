import os
from datetime import datetime, timezone
from pathlib import Path

import pytest


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def touch(path: Path, when: datetime):
    ts = when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def make_log(tmp_path):
    """Write ``<tmp>/logs/<host>/<name>`` with the given lines and mtime."""
    root = tmp_path / "logs"
    root.mkdir()

    def _make_log(host, name, lines, mtime):
        host_dir = root / host
        host_dir.mkdir(exist_ok=True)
        path = host_dir / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        touch(path, mtime)
        return path

    _make_log.root = root
    return _make_log
