"""Script-name resolution for placeholder locations."""

import json
from pathlib import Path
from typing import Callable, Sequence

from ..config import PathLike

# index -> human-readable script name; may raise LookupError or return None
ScriptResolver = Callable[[int], "str | None"]


class ScriptNameResolver:
    """Maps script indexes to names, in the order scripts were loaded."""

    def __init__(self, names: Sequence[str]):
        self._names = list(names)

    def __call__(self, index: int) -> str:
        if index < 0:
            raise IndexError(f"script index out of range: {index}")
        return self._names[index]

    def __len__(self) -> int:
        return len(self._names)

    @classmethod
    def from_file(cls, path: PathLike) -> "ScriptNameResolver":
        """
        Load a script table from JSON.

        Accepts either a list of names or a list of rows laid out like the
        engine's script table, ``[id, name, source...]``, name in column 1.
        """
        with Path(path).open(encoding="utf-8") as fh:
            rows = json.load(fh)

        if not isinstance(rows, list):
            raise ValueError(f"Script table must be a JSON list: {path}")

        names = []
        for row in rows:
            if isinstance(row, str):
                names.append(row)
            elif isinstance(row, list) and len(row) > 1:
                names.append(str(row[1]))
            else:
                raise ValueError(f"Unrecognized script table row: {row!r}")
        return cls(names)
