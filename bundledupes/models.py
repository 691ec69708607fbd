from __future__ import annotations

import typing as t
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ---------- Raw report tree ----------

@dataclass(frozen=True)
class Leaf:
    path: str
    size: t.Optional[int] = None


@dataclass(frozen=True)
class Internal:
    children: t.List["SizeNode"] = field(default_factory=list)


SizeNode = t.Union[Leaf, Internal]


# ---------- Report entities ----------

class FileEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    size: int = 0


class ResolvedPackage(BaseModel):
    """One installed copy of a package, identified by its store directory."""

    model_config = ConfigDict(frozen=True)

    manifest_path: str
    name: str
    version: str
    files: t.List[FileEntry] = Field(min_length=1)

    @computed_field  # type: ignore[misc]
    @property
    def size(self) -> int:
        return sum(f.size for f in self.files)

    def files_by_size(self) -> t.List[FileEntry]:
        return sorted(self.files, key=lambda f: f.size, reverse=True)


class PackageGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    installs: t.List[ResolvedPackage] = Field(min_length=1)

    @property
    def is_duplicate(self) -> bool:
        return len(self.installs) > 1

    @computed_field  # type: ignore[misc]
    @property
    def size(self) -> int:
        return sum(p.size for p in self.installs)

    @computed_field  # type: ignore[misc]
    @property
    def savings(self) -> float:
        # Approximation: assumes every install weighs the same
        return self.size / len(self.installs)


class DuplicateReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    report_path: str
    total_size: int
    duplicates: t.List[PackageGroup]
    unique: t.List[ResolvedPackage]

    @computed_field  # type: ignore[misc]
    @property
    def wasted(self) -> float:
        return sum(g.savings for g in self.duplicates)
