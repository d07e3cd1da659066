"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Backup / Restore                                              ║
║                                                                              ║
║  FORMAT (6 champs EXACTS, pas de version, pas de checksum):                  ║
║    promoters, floors, sales, complaints, feedbacks, settings                 ║
║                                                                              ║
║  RESTORE:                                                                    ║
║  - Le document est parsé AVANT toute écriture                                ║
║  - Chaque clé présente écrase la collection telle quelle (pas de merge)      ║
║  - Clé absente = collection intacte                                          ║
║  - Pas de rollback: une écriture refusée laisse les précédentes en place     ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from services.errors import BackupParseError
from services.repository import BaseRepository, Collection

logger = logging.getLogger("backup")

# Ordre des champs dans le document
BACKUP_FIELDS = [
    Collection.PROMOTERS,
    Collection.FLOORS,
    Collection.SALES,
    Collection.COMPLAINTS,
    Collection.FEEDBACKS,
    Collection.SETTINGS,
]


async def export_snapshot(repo: BaseRepository) -> Dict[str, List[Dict[str, Any]]]:
    """Every collection, full and in store order"""
    return {c.value: await repo.list(c) for c in BACKUP_FIELDS}


async def export_snapshot_json(repo: BaseRepository) -> str:
    return json.dumps(await export_snapshot(repo), indent=2, ensure_ascii=False)


def backup_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"promoter_pro_backup_{day.isoformat()}.json"


def check_snapshot(document: Any) -> Dict[str, Any]:
    """Top level must be an object and every known field, if present, a list"""
    if not isinstance(document, dict):
        raise BackupParseError("Failed to parse backup file: top-level value must be an object")

    for collection in BACKUP_FIELDS:
        value = document.get(collection.value)
        if value is not None and not isinstance(value, list):
            raise BackupParseError(
                f"Failed to parse backup file: '{collection.value}' must be a list"
            )

    return document


def parse_snapshot(raw: Union[str, bytes]) -> Dict[str, Any]:
    """
    Parse a backup document.

    Raises:
        BackupParseError if the text is not JSON or does not have the backup shape
    """
    try:
        document = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise BackupParseError(f"Failed to parse backup file: {e}") from e

    return check_snapshot(document)


async def restore_snapshot(repo: BaseRepository, document: Union[str, bytes, Dict[str, Any]]) -> List[str]:
    """
    Overwrite every collection present in the document.

    Record shapes are NOT validated. Collections are written one after the
    other; if a write fails the earlier ones stay applied.

    Returns:
        Names of the collections that were overwritten
    """
    if isinstance(document, (str, bytes)):
        document = parse_snapshot(document)
    else:
        document = check_snapshot(document)

    restored = []
    for collection in BACKUP_FIELDS:
        items = document.get(collection.value)
        if items is None:
            continue

        await repo.replace(collection, items)
        restored.append(collection.value)

    logger.info(f"[BACKUP] Restored collections: {restored}")
    return restored
