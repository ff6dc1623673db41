from typing import Final


HOME_ENV_VARS: Final[tuple[str, ...]] = ("HOME", "USERPROFILE")
HOME_MARKER: Final[str] = "~"

HTTP_USER_AGENT: Final[str] = "dotdep"

DEFAULT_MANIFEST_FILENAME: Final[str] = "dotdep.yaml"
