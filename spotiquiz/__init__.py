# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

from pathlib import Path

# Read version from VERSION file at project root
_version_file = Path(__file__).parent.parent / "VERSION"
if _version_file.exists():
    __version__ = _version_file.read_text().strip()
else:
    __version__ = "0.0.0-dev"
