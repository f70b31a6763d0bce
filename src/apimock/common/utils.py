"""
apimock Common Utilities

Small helpers shared by the CLI and the mock server.
"""

from pathlib import Path
from typing import List


def describe_mock_directory(mock_dir: Path) -> List[str]:
    """
    Describe the top level of the mock directory for the startup banner.

    Folders are shown with a trailing "/", and only .json files are listed.

    Args:
        mock_dir: Mock store root directory

    Returns:
        One display line per entry, sorted by name. Empty if the directory
        cannot be read.

    Example:
        for line in describe_mock_directory(Path("mock")):
            print(line)  # "📁 users/", "📄 health.json", ...
    """
    try:
        entries = sorted(Path(mock_dir).iterdir(), key=lambda p: p.name)
    except OSError:
        return []

    lines = []
    for entry in entries:
        if entry.is_dir():
            lines.append(f"└─ 📁 {entry.name}/")
        elif entry.name.endswith(".json"):
            lines.append(f"├─ 📄 {entry.name}")
    return lines
