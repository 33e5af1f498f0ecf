"""Shared fixtures: fake toolchains whose bin/llc is a shell script."""

import stat
import subprocess

import pytest

SAMPLE_STDERR = """\
===-------------------------------------------------------------------------===
                          ... Statistics Collected ...
===-------------------------------------------------------------------------===

1234 asm-printer               - Number of machine instrs printed
  56 pei-prologue-epilogue     - Number of bytes used for stack in all functions
   3 regalloc                  - Number of copies coalesced

===-------------------------------------------------------------------------===
                      ... Pass execution timing report ...
===-------------------------------------------------------------------------===
  Total Execution Time: 0.0421 seconds (0.0450 wall clock)
"""


@pytest.fixture
def bitcode_file(tmp_path):
    """A fake bitcode file."""
    path = tmp_path / "sample.bc"
    path.write_bytes(b"BC\xc0\xde" + bytes(range(64)))
    return str(path)


@pytest.fixture
def make_toolchain(tmp_path):
    """Returns a factory creating `<tmp>/<name>/bin/llc` from a shell body."""

    def factory(name: str, body: str) -> str:
        root = tmp_path / name
        (root / "bin").mkdir(parents=True)
        llc = root / "bin" / "llc"
        llc.write_text("#!/bin/sh\n" + body)
        llc.chmod(llc.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(root)

    return factory


@pytest.fixture
def stats_toolchain(make_toolchain, tmp_path):
    """Returns a factory for toolchains that consume stdin and print stats."""

    def factory(name: str, stderr: str = SAMPLE_STDERR) -> str:
        report = tmp_path / f"{name}.stderr"
        report.write_text(stderr)
        return make_toolchain(
            name, f'cat > /dev/null\necho "some asm"\ncat "{report}" >&2\n'
        )

    return factory


@pytest.fixture
def no_spawn(monkeypatch):
    """Fails the test if a child process is started."""

    def refuse(*args, **kwargs):
        raise AssertionError(f"unexpected process spawn: {args}")

    monkeypatch.setattr(subprocess, "Popen", refuse)
