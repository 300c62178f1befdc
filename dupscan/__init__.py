"""
Package `dupscan` - content-hash duplicate file detection.

- `scanner`: directory walking, hashing and the two-pass duplicate search.
- `cli`: command-line entry point, report rendering and progress display.
- `config`: settings read from the environment or a local `.env` file.
"""
from .scanner.models import DuplicateGroup, ScanPreferences, ScanResult
from .scanner.session import ScanSession, find_duplicates

__all__ = ["DuplicateGroup", "ScanPreferences", "ScanResult", "ScanSession", "find_duplicates"]
__version__ = "0.1.0"
