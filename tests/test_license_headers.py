# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Verify all domain and port source files carry the standard MIT license header."""

from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "src" / "orbitprop"

EXPECTED_HEADER_LINES = [
    "# Copyright (c) 2026 Jeroen Visser. All rights reserved.",
    "# Licensed under the MIT License — see LICENSE.",
]


def _collect_py_files():
    """Collect all .py files below domain/ and ports/."""
    files = []
    for sub in ("domain", "ports"):
        files.extend((PACKAGE_ROOT / sub).rglob("*.py"))
    return sorted(files)


def test_all_files_have_standard_mit_header():
    """Every domain and port module must start with the 2-line header."""
    files = _collect_py_files()
    assert len(files) > 0, "No .py files found in orbitprop"

    violations = []
    for py_file in files:
        lines = py_file.read_text(encoding="utf-8").splitlines()
        if len(lines) < 2:
            violations.append((py_file, "File has fewer than 2 lines"))
            continue
        for i, expected in enumerate(EXPECTED_HEADER_LINES):
            if lines[i] != expected:
                violations.append((py_file, f"Line {i + 1}: expected {expected!r}, got {lines[i]!r}"))
                break

    if violations:
        msg_parts = [f"\n{len(violations)} file(s) with non-standard headers:"]
        for path, reason in violations:
            msg_parts.append(f"  {path.relative_to(PACKAGE_ROOT.parent)}: {reason}")
        raise AssertionError("\n".join(msg_parts))


def test_license_file_matches_header():
    """The header points at LICENSE, which must exist and carry the MIT text."""
    license_file = PACKAGE_ROOT.parent.parent / "LICENSE"
    assert license_file.is_file(), "LICENSE referenced by source headers is missing"
    text = license_file.read_text(encoding="utf-8")
    assert text.startswith("MIT License")
    assert "Copyright (c) 2026 Jeroen Visser" in text
