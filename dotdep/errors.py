from pathlib import Path


class DotdepError(Exception):
    """Base user-facing application error."""


class InvalidActionConfigError(DotdepError):
    def __init__(self, action: str, message: str) -> None:
        self.action = action
        self.message = message
        super().__init__(f"Invalid {action} action: {message}")


class ManifestFileError(DotdepError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingManifestError(ManifestFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing manifest file")


class InvalidManifestFormatError(ManifestFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid YAML format ({detail})")


class InvalidManifestSchemaError(ManifestFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid manifest schema ({detail})")
