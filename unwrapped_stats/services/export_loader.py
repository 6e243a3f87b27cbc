"""Reading streaming history exports (JSON files, ZIP archives, directories)"""
import io
import json
import logging
import os
import re
import zipfile
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Account data export and extended streaming history export file names
HISTORY_MEMBER_PATTERN = re.compile(
    r'(StreamingHistory_music_\d+\.json|Streaming_History_Audio_.*\.json)$',
    re.IGNORECASE
)

DIGIT_RUN = re.compile(r'(\d+)')

class ExportParseError(Exception):
    """Raised when an export file or archive cannot be read."""
    pass

def natural_key(name: str) -> List[Any]:
    """Sort key ordering numbered files numerically (_2 before _10)"""
    return [int(part) if part.isdigit() else part.lower() for part in DIGIT_RUN.split(name)]

def parse_history_json(content: bytes, source: str = "<bytes>") -> List[Dict[str, Any]]:
    """
    Parse one streaming history JSON document.

    Args:
        content: Raw bytes of the JSON file
        source: Name used in error messages

    Returns:
        The records of the top-level array, unvalidated

    Raises:
        ExportParseError: If the JSON is malformed or not an array
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ExportParseError(f"Invalid JSON in {source}: {e}")

    if not isinstance(data, list):
        raise ExportParseError(f"Expected JSON array of listening events in {source}")

    return data

def parse_history_zip(content: bytes, source: str = "<bytes>") -> List[Dict[str, Any]]:
    """Parse every streaming history member of a ZIP archive, in file number order"""
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as e:
        raise ExportParseError(f"Invalid ZIP archive {source}: {e}")

    records: List[Dict[str, Any]] = []
    with archive:
        members = sorted(
            (
                info.filename for info in archive.infolist()
                if not info.is_dir() and HISTORY_MEMBER_PATTERN.search(info.filename)
            ),
            key=natural_key
        )
        if not members:
            raise ExportParseError(f"No streaming history files found in {source}")

        for member in members:
            logger.info(f"Reading {member} from {source}")
            records.extend(parse_history_json(archive.read(member), f"{source}:{member}"))

    return records

def load_export_file(path: str) -> List[Dict[str, Any]]:
    """Load records from a single .json or .zip export file"""
    try:
        with open(path, 'rb') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Failed to read export file {path}: {e}")
        raise

    if zipfile.is_zipfile(io.BytesIO(content)) or path.lower().endswith('.zip'):
        return parse_history_zip(content, path)
    return parse_history_json(content, path)

def load_export_records(path: str) -> List[Dict[str, Any]]:
    """
    Load and concatenate every record found at path.

    A directory contributes each .json and .zip file it holds, in file number order.

    Raises:
        FileNotFoundError: If path does not exist or holds no export files
        ExportParseError: If an export file cannot be parsed
    """
    if os.path.isfile(path):
        records = load_export_file(path)
        logger.info(f"Loaded {len(records)} records from {path}")
        return records

    if not os.path.isdir(path):
        raise FileNotFoundError(f"Export path not found: {path}")

    files = sorted(
        (
            name for name in os.listdir(path)
            if name.lower().endswith(('.json', '.zip')) and os.path.isfile(os.path.join(path, name))
        ),
        key=natural_key
    )
    if not files:
        raise FileNotFoundError(f"No input files found in {path}")

    records: List[Dict[str, Any]] = []
    for name in files:
        file_records = load_export_file(os.path.join(path, name))
        logger.info(f"Loaded {len(file_records)} records from {name}")
        records.extend(file_records)
    return records
