#!/usr/bin/env python3
"""Concourse resource entry point.

Installed as ``/opt/resource/check``, ``/opt/resource/in`` and ``/opt/resource/out``
the verb is taken from the program name; otherwise it is the first argument
(``notion-resource check``). The request is read from stdin and the response is
written to stdout as a single JSON line. Failures print a JSON error object to
stderr and exit with the code of the error class.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any, NoReturn, TextIO

from dotenv import load_dotenv
from pydantic import ValidationError

from notion_resource.app import check_version, fetch_records, put_records, resolve_artifact_path
from notion_resource.common.logging import configure_logging
from notion_resource.config.errors import ConfigurationError
from notion_resource.domain.errors import NotionResourceError
from notion_resource.protocol import (
    CheckRequest,
    InRequest,
    OutRequest,
    VersionPayload,
    VersionResponse,
    metadata,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

VERBS = ("check", "in", "out")
INVALID_REQUEST_EXIT_CODE = 2
UNEXPECTED_ERROR_EXIT_CODE = 1


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="notion-resource",
        description="Concourse resource for Notion databases",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="Report the current database version")

    in_parser = subparsers.add_parser("in", help="Write database records to a directory")
    in_parser.add_argument("path", help="Destination directory for records.json")

    out_parser = subparsers.add_parser("out", help="Push records from a file to the database")
    out_parser.add_argument("path", help="Working directory the params path is relative to")

    return parser.parse_args(list(argv))


def _resolve_argv(argv: Sequence[str], program: str) -> list[str]:
    verb = Path(program).name
    if verb in VERBS:
        return [verb, *argv]
    return list(argv)


def _run_check(raw: str) -> list[dict[str, Any]]:
    request = CheckRequest.model_validate_json(raw)
    version = check_version(request.source.to_config())
    return [VersionPayload.from_version(version).model_dump(mode="json")]


def _run_in(raw: str, path: str) -> dict[str, Any]:
    request = InRequest.model_validate_json(raw)
    result = fetch_records(
        request.source.to_config(),
        request.version.to_version(),
        Path(path),
    )
    response = VersionResponse(
        version=VersionPayload.from_version(result.version),
        metadata=metadata(records=result.record_count),
    )
    return response.model_dump(mode="json")


def _run_out(raw: str, path: str) -> dict[str, Any]:
    request = OutRequest.model_validate_json(raw)
    params = request.params
    result = put_records(
        request.source.to_config(),
        resolve_artifact_path(path, params.path),
        params.mode,
    )
    response = VersionResponse(
        version=VersionPayload.from_version(result.version),
        metadata=metadata(
            mode=params.mode,
            records=result.progress.processed,
            created=result.progress.created,
            deleted=result.progress.deleted,
        ),
    )
    return response.model_dump(mode="json")


def _fail(exc: BaseException, exit_code: int, stderr: TextIO) -> NoReturn:
    details: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    progress = getattr(exc, "progress", None)
    if progress is not None:
        details["progress"] = asdict(progress)
    error = {"error": details}
    print(json.dumps(error), file=stderr)
    sys.exit(exit_code)


def main(
    argv: Sequence[str] | None = None,
    *,
    program: str | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(_resolve_argv(args_list, program or sys.argv[0]))
    err = stderr or sys.stderr

    try:
        raw = (stdin or sys.stdin).read()
        if parsed_args.command == "check":
            payload: object = _run_check(raw)
        elif parsed_args.command == "in":
            payload = _run_in(raw, parsed_args.path)
        elif parsed_args.command == "out":
            payload = _run_out(raw, parsed_args.path)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValidationError as exc:
        log.error(f"Invalid {parsed_args.command} request: {exc}")
        _fail(exc, INVALID_REQUEST_EXIT_CODE, err)
    except (NotionResourceError, ConfigurationError) as exc:
        log.error(f"{parsed_args.command} failed: {exc}")
        _fail(exc, exc.exit_code, err)
    except Exception as exc:
        log.exception(f"Unexpected error during {parsed_args.command}")
        _fail(exc, UNEXPECTED_ERROR_EXIT_CODE, err)

    print(json.dumps(payload), file=stdout or sys.stdout)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
