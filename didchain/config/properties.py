"""
Properties Loader
=================

Reads the Java-style ``key=value`` property files used by existing
ledger deployments (``evm.network.url=...``, ``fabric.mspId=...``).

Version: 0.1.0
"""

from pathlib import Path

from didchain.errors import ConfigurationError

_COMMENT_PREFIXES = ("#", "!")


def parse_properties(text: str) -> dict[str, str]:
    """
    Parse properties text.

    Supports ``=`` and ``:`` separators, ``#``/``!`` comments and
    backslash line continuations. Later keys override earlier ones.

    Args:
        text: Properties file content

    Returns:
        dict of property key to value
    """
    properties: dict[str, str] = {}
    pending = ""

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not pending and (not line or line.startswith(_COMMENT_PREFIXES)):
            continue

        if line.endswith("\\") and not line.endswith("\\\\"):
            pending += line[:-1]
            continue

        line = pending + line
        pending = ""

        separators = [i for i in (line.find("="), line.find(":")) if i != -1]
        if not separators:
            properties[line] = ""
            continue

        split_at = min(separators)
        key = line[:split_at].strip()
        properties[key] = line[split_at + 1 :].strip()

    if pending:
        key, _, value = pending.partition("=")
        properties[key.strip()] = value.strip()

    return properties


def load_properties(resource: str | Path) -> dict[str, str]:
    """
    Load a properties file.

    Args:
        resource: Absolute path, or path relative to the working directory

    Returns:
        dict of property key to value

    Raises:
        ConfigurationError: If the file does not exist or cannot be read
    """
    path = Path(resource)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read properties file '{path}': {e}") from e

    return parse_properties(text)
