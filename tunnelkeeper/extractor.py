"""
ZIP extraction into the scratch workspace.

Permission bits stored in the archive are not restored; the launcher marks
the one binary it needs as executable.
"""

import logging
import zipfile
from pathlib import Path

from .errors import ExtractionError

logger = logging.getLogger(__name__)


def extract(archive_path: Path, target_dir: Path) -> list[Path]:
    """Unpack every entry of ``archive_path`` into ``target_dir``, overwriting existing files."""
    archive_path = Path(archive_path)
    target_dir = Path(target_dir)
    logger.info("Preparing environment...")

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "r") as zf:
            names = zf.namelist()
            zf.extractall(target_dir)
    except zipfile.BadZipFile as e:
        raise ExtractionError(f"Corrupt archive {archive_path.name}: {e}") from e
    except NotImplementedError as e:
        raise ExtractionError(f"Unsupported compression in {archive_path.name}: {e}") from e
    except (zipfile.LargeZipFile, RuntimeError, EOFError) as e:
        raise ExtractionError(f"Could not read {archive_path.name}: {e}") from e
    except OSError as e:
        raise ExtractionError(f"I/O error extracting {archive_path.name}: {e}") from e

    logger.info(f"Environment ready ({len(names)} entries extracted)")
    return [target_dir / name for name in names]
