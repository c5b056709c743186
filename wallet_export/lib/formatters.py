"""
Output formatters for wallet snapshots.

This module serializes WalletSnapshot objects to the wallet-balance JSON
document and writes them to stdout, a file, or a bulk output directory.
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .models import WalletSnapshot


def generate_timestamp() -> str:
    """
    Generate a timestamp string for filenames.

    Returns:
        Timestamp in YYYYMMDD_HHMMSS format
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def generate_filename(directory: str, wallet: str, timestamp: Optional[str] = None) -> str:
    """
    Generate a per-wallet filename for bulk exports.

    Examples:
        generate_filename("out", "0xabc", "20241214_153022")
        -> "out/0xabc_20241214_153022.json"
    """
    if timestamp is None:
        timestamp = generate_timestamp()
    return str(Path(directory) / f"{wallet}_{timestamp}.json")


def snapshot_to_document(snapshot: WalletSnapshot) -> Dict[str, Any]:
    """Build the output document for a snapshot."""
    return snapshot.to_document()


def write_json_to_stream(snapshot: WalletSnapshot, stream: TextIO) -> None:
    """
    Write a snapshot document to a stream as indented JSON.

    Args:
        snapshot: Snapshot to serialize
        stream: File-like object to write to
    """
    json.dump(snapshot_to_document(snapshot), stream, indent=2)
    stream.write("\n")


def write_snapshot(snapshot: WalletSnapshot, output_path: Optional[str] = None) -> Optional[str]:
    """
    Write a snapshot to a file or stdout.

    Args:
        snapshot: Snapshot to write
        output_path: Destination file. If None, writes to stdout.

    Returns:
        The file path written, or None for stdout
    """
    if output_path is None:
        write_json_to_stream(snapshot, sys.stdout)
        return None

    path = Path(output_path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        write_json_to_stream(snapshot, f)

    return str(path)
