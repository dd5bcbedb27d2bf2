#!/usr/bin/env python3
import subprocess
import sys
from typing import Tuple


def run_and_capture(cmd: list[str]) -> Tuple[int, str]:
    """Run a command, stream output live, and also capture it for parsing."""
    proc = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    assert proc.stdout is not None

    out_lines: list[str] = []
    for line in proc.stdout:
        sys.stdout.write(line)
        out_lines.append(line)

    rc = proc.wait()
    return rc, "".join(out_lines)


def main() -> int:
    # 1) mypy
    rc, _ = run_and_capture([sys.executable, "-m", "mypy", "--follow-imports=silent", "zxlite/"])
    if rc != 0:
        print("FAILED: mypy errors.")
        return rc

    # 2) tests (end-to-end Neo4j tests skip without NEO4J_* variables)
    rc, _ = run_and_capture([sys.executable, "-m", "pytest", "tests", "-q"])
    if rc != 0:
        print("FAILED: tests.")
        return rc

    print("PASS: local CI checks succeeded.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
