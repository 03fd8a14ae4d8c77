"""Composite ("full") views assembled from several registry calls."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from registry_client.schemas.registry import (
    Category,
    CrateDownloads,
    Dependency,
    Keyword,
    RegistryModel,
    ReverseDependencies,
    User,
    Version,
    VersionLinks,
)


class FullVersion(RegistryModel):
    """A version merged with its authors and declared dependencies."""

    id: int
    num: str
    dl_path: str = ""
    readme_path: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
    downloads: int = 0
    features: dict[str, list[str]] = Field(default_factory=dict)
    yanked: bool = False
    license: str | None = None
    links: VersionLinks | None = None

    author_names: list[str] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)

    @classmethod
    def from_parts(
        cls,
        version: Version,
        author_names: list[str],
        dependencies: list[Dependency],
    ) -> "FullVersion":
        return cls(
            id=version.id,
            num=version.num,
            dl_path=version.dl_path,
            readme_path=version.readme_path,
            created_at=version.created_at,
            updated_at=version.updated_at,
            downloads=version.downloads,
            features=version.features,
            yanked=version.yanked,
            license=version.license,
            links=version.links,
            author_names=author_names,
            dependencies=dependencies,
        )


class FullCrate(RegistryModel):
    """Everything known about a crate: metadata, versions, owners and usage."""

    id: str
    name: str
    description: str | None = None
    license: str | None = None
    documentation: str | None = None
    homepage: str | None = None
    repository: str | None = None
    total_downloads: int = 0
    max_version: str = ""
    created_at: dt.datetime
    updated_at: dt.datetime

    categories: list[Category] = Field(default_factory=list)
    keywords: list[Keyword] = Field(default_factory=list)
    downloads: CrateDownloads
    owners: list[User] = Field(default_factory=list)
    reverse_dependencies: ReverseDependencies
    versions: list[FullVersion] = Field(default_factory=list)
