from __future__ import annotations

from pathlib import Path

from ..core.enums import DatasetSlot, UploadState
from ..core.errors import (
    DecodeError,
    InsufficientDataError,
    SheetVizError,
    UnsupportedFileTypeError,
)
from ..core.logging_config import get_logger
from ..core.models import Row, UploadStatus
from ..core.store import DatasetStore, parse_slot
from .decoder import decode_spreadsheet, is_supported_file

logger = get_logger(__name__)

MIN_ROWS = 2
GENERAL = "general"
ALL_SLOTS_REQUIRED_MESSAGE = (
    f"Please upload all {len(DatasetSlot)} Excel files before proceeding."
)


def validate_extension(file_name: str) -> None:
    if not is_supported_file(file_name):
        raise UnsupportedFileTypeError(f"Unsupported file extension: {file_name}")


def validate_row_count(rows: list[Row], file_name: str) -> None:
    if len(rows) < MIN_ROWS:
        raise InsufficientDataError(
            f"{file_name} decoded to {len(rows)} row(s); at least {MIN_ROWS} required"
        )


def read_upload(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Failed to read file {path}: {e}") from e


class UploadService:
    """Validates, decodes and stores uploaded spreadsheets, one slot at a time.

    Per-slot status and error messages are transient form feedback; the
    authoritative data lives in the DatasetStore.
    """

    def __init__(self, store: DatasetStore) -> None:
        self.store = store
        self._statuses: dict[DatasetSlot, UploadStatus] = {}
        self._errors: dict[str, str] = {}
        self._reset_statuses()

    def _reset_statuses(self) -> None:
        self._statuses = {slot: UploadStatus() for slot in DatasetSlot}
        self._errors = {}

    @property
    def statuses(self) -> dict[DatasetSlot, UploadStatus]:
        return dict(self._statuses)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    def status(self, slot: str | DatasetSlot) -> UploadStatus | None:
        key = parse_slot(slot)
        return self._statuses.get(key) if key else None

    def upload(
        self, slot: str | DatasetSlot, source: str | Path, content: bytes | None = None
    ) -> UploadStatus:
        """Handle one file upload for ``slot``.

        Args:
            slot: Logical dataset slot
            source: Path of the file, or just its name when ``content`` is given
            content: Raw bytes; read from ``source`` when omitted

        Returns:
            The slot's updated UploadStatus. Validation and decode failures are
            recorded on the status rather than raised.
        """
        key = parse_slot(slot)
        path = Path(source)
        file_name = path.name

        if key is None:
            logger.warning(f'Unknown dataset slot: "{slot}"', extra={"slot": str(slot)})
            return UploadStatus(file_name=file_name)

        self._errors.pop(key.value, None)
        current = self._statuses[key]

        try:
            validate_extension(file_name)
            data = content if content is not None else read_upload(path)
            rows = decode_spreadsheet(data, file_name)
            validate_row_count(rows, file_name)
        except SheetVizError as e:
            log = logger.warning if isinstance(e, DecodeError) else logger.info
            log(
                "Upload rejected",
                extra={"slot": key.value, "file_name": file_name, "error": str(e)},
            )
            self._errors[key.value] = e.user_message
            # Earlier successful upload for this slot stays in place.
            status = UploadStatus(
                file_name=current.file_name,
                status=current.status,
                error=e.user_message,
                row_count=current.row_count,
            )
            self._statuses[key] = status
            return status

        self.store.set_dataset(key, rows)
        status = UploadStatus(
            file_name=file_name, status=UploadState.SUCCESS, row_count=len(rows)
        )
        self._statuses[key] = status
        logger.info(
            "Upload stored", extra={"slot": key.value, "file_name": file_name, "rows": len(rows)}
        )
        return status

    def ready_for_charts(self, require_all: bool = True) -> bool:
        """Check whether uploads allow moving on to chart building."""
        succeeded = [s for s in self._statuses.values() if s.status is UploadState.SUCCESS]
        ready = len(succeeded) == len(self._statuses) if require_all else bool(succeeded)
        if not ready:
            self._errors[GENERAL] = (
                ALL_SLOTS_REQUIRED_MESSAGE
                if require_all
                else "Please upload at least one Excel file before proceeding."
            )
        else:
            self._errors.pop(GENERAL, None)
        return ready

    def clear(self) -> None:
        """Clear every dataset, the report and all upload feedback."""
        self.store.clear_all()
        self._reset_statuses()
        logger.info("All uploads cleared")
