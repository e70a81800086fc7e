"""Application services behind the check, in and out verbs."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from notion_resource.adapters.notion import NotionClient
from notion_resource.domain.errors import ArtifactError
from notion_resource.domain.fingerprint import check
from notion_resource.domain.reconciliation import reconcile
from notion_resource.domain.retrieval import retrieve
from notion_resource.domain.types import ReconciliationProgress

if TYPE_CHECKING:
    from notion_resource.config.notion import NotionConfig
    from notion_resource.domain.ports import RecordStore
    from notion_resource.domain.reconciliation import Mode
    from notion_resource.domain.types import Properties, Version

type StoreFactory = Callable[[NotionConfig], AbstractContextManager[RecordStore]]

RECORDS_FILENAME = "records.json"
DEFAULT_OUT_PATH = "out.json"

log = getLogger(__name__)


def _default_store_factory(config: NotionConfig) -> AbstractContextManager[RecordStore]:
    return NotionClient(config=config)


@dataclass(slots=True)
class FetchResult:
    """Outcome of an in step."""

    version: Version
    record_count: int
    path: Path


@dataclass(slots=True)
class PutResult:
    """Outcome of an out step."""

    version: Version
    progress: ReconciliationProgress
    path: Path


def check_version(
    config: NotionConfig,
    *,
    store_factory: StoreFactory | None = None,
) -> Version:
    """Return the current version of the configured database."""

    with (store_factory or _default_store_factory)(config) as store:
        return check(store, config.database)


def fetch_records(
    config: NotionConfig,
    version: Version,
    destination: Path,
    *,
    store_factory: StoreFactory | None = None,
) -> FetchResult:
    """Write the records of ``version`` to ``destination/records.json``."""

    with (store_factory or _default_store_factory)(config) as store:
        records = retrieve(store, config.database, version)

    path = destination / RECORDS_FILENAME
    write_artifact(path, [record.properties for record in records])
    log.info(f"Wrote {len(records)} records to {path}")
    return FetchResult(version=version, record_count=len(records), path=path)


def put_records(
    config: NotionConfig,
    source_path: Path,
    mode: Mode,
    *,
    store_factory: StoreFactory | None = None,
) -> PutResult:
    """Reconcile the records stored at ``source_path`` into the configured database."""

    log.info(f"Loading data from {source_path} for out step")
    local_records = read_artifact(source_path)
    progress = ReconciliationProgress()
    with (store_factory or _default_store_factory)(config) as store:
        version = reconcile(store, config.database, local_records, mode, progress=progress)
    return PutResult(version=version, progress=progress, path=source_path)


def resolve_artifact_path(working_dir: str | Path, path: str | Path = DEFAULT_OUT_PATH) -> Path:
    """Resolve ``path`` against the working directory unless it is absolute."""

    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    base = Path(working_dir)
    if not base.is_absolute():
        base = Path.cwd() / base
    return base / candidate


def read_artifact(path: Path) -> list[Properties]:
    """Load a JSON array of property maps."""

    try:
        with path.open(encoding="utf-8") as handle:
            payload: Any = json.load(handle)
    except FileNotFoundError:
        raise ArtifactError("Artifact file does not exist", path=path) from None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ArtifactError(f"Cannot read artifact file ({exc})", path=path) from exc

    if not isinstance(payload, list):
        raise ArtifactError("Artifact must contain a JSON array of property maps", path=path)
    records: list[Properties] = []
    for index, item in enumerate(payload):
        if not isinstance(item, Mapping):
            raise ArtifactError(f"Artifact entry {index} is not a JSON object", path=path)
        records.append(dict(item))
    return records


def write_artifact(path: Path, records: list[Properties]) -> None:
    """Replace ``path`` with a JSON array of property maps in one step."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, ensure_ascii=False)
            Path(tmp_name).replace(path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise ArtifactError(f"Cannot write artifact file ({exc})", path=path) from exc
