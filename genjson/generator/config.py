"""Generator configuration."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from dataclasses_json import DataClassJsonMixin

from .emitter import DEFAULT_RUNTIME_IMPORT


@dataclass(frozen=True)
class GeneratorConfig(DataClassJsonMixin):
    """Where to find models and where to put the generated package.

    Models are scanned under ``root / source_dir / base_package`` and the
    output package ``dest_package`` is written under ``root / source_dir``.
    """

    base_package: str = ""
    dest_package: str = ""
    root: str = "."
    source_dir: str = "."
    runtime_import: str = DEFAULT_RUNTIME_IMPORT
    readers_module: str = "readers"
    writers_module: str = "writers"

    @classmethod
    def load(cls, path: str | Path) -> "GeneratorConfig":
        """Load a configuration from a JSON file."""
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    def override(self, **values: Any) -> "GeneratorConfig":
        """Return a copy with every non-None value applied."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in values.items() if k in known and v is not None})

    @property
    def source_root(self) -> Path:
        return Path(self.root) / self.source_dir

    @property
    def dest_path(self) -> Path:
        return self.source_root.joinpath(*self.dest_package.split("."))
