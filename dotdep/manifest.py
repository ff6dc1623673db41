"""Load declarative action manifests (YAML) and turn them into actions."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from jsonschema import Draft202012Validator

from dotdep.actions import command, download, remove, symlink
from dotdep.errors import (
    InvalidManifestFormatError,
    InvalidManifestSchemaError,
    MissingManifestError,
)
from dotdep.models import Action, OutputMode
from dotdep.utils import resolve_path


_COMMAND_VECTOR = {
    "type": "array",
    "items": {"type": "string"},
    "minItems": 1,
}
_OUTPUT_MODE = {"enum": [mode.value for mode in OutputMode]}


def _single_key(name: str, properties: dict[str, Any], required: list[str]) -> dict:
    return {
        "type": "object",
        "properties": {
            name: {
                "type": "object",
                "properties": properties,
                "required": required,
                "additionalProperties": False,
            }
        },
        "required": [name],
        "additionalProperties": False,
    }


MANIFEST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "base_dir": {"type": "string", "minLength": 1},
        "actions": {
            "type": "array",
            "items": {
                "oneOf": [
                    _single_key(
                        "command",
                        {
                            "command": _COMMAND_VECTOR,
                            "revert_command": _COMMAND_VECTOR,
                            "stdout": _OUTPUT_MODE,
                            "stderr": _OUTPUT_MODE,
                            "env": {
                                "type": "object",
                                "additionalProperties": {"type": "string"},
                            },
                            "cwd": {"type": "string", "minLength": 1},
                        },
                        ["command"],
                    ),
                    _single_key(
                        "download",
                        {
                            "url": {"type": "string", "minLength": 1},
                            "dest": {"type": "string", "minLength": 1},
                            "overwrite": {"type": "boolean"},
                            "timestamping": {"type": "boolean"},
                        },
                        ["url", "dest"],
                    ),
                    _single_key(
                        "remove",
                        {
                            "path": {"type": "string", "minLength": 1},
                            "recursive": {"type": "boolean"},
                        },
                        ["path"],
                    ),
                    _single_key(
                        "symlink",
                        {
                            "src": {"type": "string", "minLength": 1},
                            "dest": {"type": "string", "minLength": 1},
                            "overwrite": {"type": "boolean"},
                        },
                        ["src", "dest"],
                    ),
                ]
            },
        },
    },
    "required": ["actions"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Manifest:
    path: Path
    base_dir: Path
    entries: list[dict[str, Any]]


def _schema_error_message(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def validate_manifest(payload: Any, path: Path) -> None:
    if not isinstance(payload, dict):
        raise InvalidManifestSchemaError(path, "must be a YAML mapping")
    validator = Draft202012Validator(MANIFEST_SCHEMA)
    error = next(iter(validator.iter_errors(payload)), None)
    if error is not None:
        raise InvalidManifestSchemaError(path, _schema_error_message(error))


def load_manifest(path: Path) -> Manifest:
    if not path.exists():
        raise MissingManifestError(path)
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidManifestFormatError(path, " ".join(str(exc).split())) from exc

    validate_manifest(payload, path)

    manifest_dir = path.resolve().parent
    raw_base = payload.get("base_dir")
    base_dir = Path(resolve_path(raw_base, manifest_dir)) if raw_base else manifest_dir
    return Manifest(path=path, base_dir=base_dir, entries=list(payload["actions"]))


def _build_command(params: dict[str, Any], base_dir: Path) -> Action:
    cwd: Optional[str] = params.get("cwd")
    return command(
        params["command"],
        revert_command=params.get("revert_command"),
        stdout=params.get("stdout", OutputMode.CAPTURE),
        stderr=params.get("stderr", OutputMode.CAPTURE),
        env=params.get("env"),
        cwd=resolve_path(cwd, base_dir) if cwd else None,
    )


def _build_download(params: dict[str, Any], base_dir: Path) -> Action:
    return download(
        params["url"],
        resolve_path(params["dest"], base_dir),
        overwrite=params.get("overwrite", False),
        timestamping=params.get("timestamping", False),
    )


def _build_remove(params: dict[str, Any], base_dir: Path) -> Action:
    return remove(
        resolve_path(params["path"], base_dir),
        recursive=params.get("recursive", False),
    )


def _build_symlink(params: dict[str, Any], base_dir: Path) -> Action:
    return symlink(
        resolve_path(params["src"], base_dir),
        resolve_path(params["dest"], base_dir),
        overwrite=params.get("overwrite", False),
    )


ACTION_BUILDERS: dict[str, Callable[[dict[str, Any], Path], Action]] = {
    "command": _build_command,
    "download": _build_download,
    "remove": _build_remove,
    "symlink": _build_symlink,
}


def build_actions(manifest: Manifest) -> list[Action]:
    actions: list[Action] = []
    for entry in manifest.entries:
        ((kind, params),) = entry.items()
        actions.append(ACTION_BUILDERS[kind](params, manifest.base_dir))
    return actions
