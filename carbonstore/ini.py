"""Parser for the simple INI files used by storage configuration."""

from __future__ import annotations

import os


class IniError(ValueError):
    """A configuration file line could not be parsed."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


def parse_ini_file(filename: str | os.PathLike[str]) -> list[dict[str, str]]:
    """Read an INI file into a list of sections in file order.

    Each section is a dict of lower-cased keys to values with surrounding
    quotes removed; the section title is stored under "name".
    """
    with open(filename, "rb") as stream:
        body = stream.read().decode("utf-8", errors="replace")

    config: list[dict[str, str]] = []
    section: dict[str, str] | None = None

    for number, raw in enumerate(body.split("\n"), start=1):
        line = raw.strip()
        if not line or line[0] in ";#":
            continue

        if line[0] == "[":
            if line[-1] != "]":
                raise IniError(number, "unfinished section name")
            name = line[1:-1].strip()
            if not name:
                raise IniError(number, "empty section name")
            if section is not None:
                config.append(section)
            section = {"name": name}
            continue

        if section is None:
            raise IniError(number, "config section not found")

        key, sep, value = line.partition("=")
        if not sep:
            raise IniError(number, "key = value not found")
        key = key.strip().lower()
        if not key:
            raise IniError(number, "key is empty")
        section[key] = value.strip().strip("\"'")

    if section is not None:
        config.append(section)
    return config