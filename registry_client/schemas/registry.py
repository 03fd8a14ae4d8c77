"""Pydantic schemas for registry API payloads.

One model per JSON shape returned by the crates.io ``api/v1`` endpoints.
Unknown fields are ignored so additions on the server side do not break
decoding.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class RegistryModel(BaseModel):
    """Base model allowing population by field name as well as wire alias."""

    model_config = ConfigDict(populate_by_name=True)


class Meta(RegistryModel):
    """Pagination metadata attached to collection responses."""

    total: int = Field(0, description="Total number of items across all pages.")


class Category(RegistryModel):
    id: str
    category: str
    slug: str
    description: str | None = None
    crates_cnt: int = 0
    created_at: dt.datetime | None = None


class Keyword(RegistryModel):
    id: str
    keyword: str
    crates_cnt: int = 0
    created_at: dt.datetime | None = None


class CrateLinks(RegistryModel):
    owner_team: str | None = None
    owner_user: str | None = None
    owners: str | None = None
    reverse_dependencies: str | None = None
    version_downloads: str | None = None
    versions: str | None = None


class Crate(RegistryModel):
    """A crate as listed by the registry."""

    id: str
    name: str
    description: str | None = None
    license: str | None = None
    documentation: str | None = None
    homepage: str | None = None
    repository: str | None = None
    downloads: int = 0
    recent_downloads: int | None = None
    categories: list[str] | None = None
    keywords: list[str] | None = None
    versions: list[int] | None = None
    max_version: str = ""
    max_stable_version: str | None = None
    links: CrateLinks | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
    exact_match: bool | None = None


class CratesPage(RegistryModel):
    """One page of the crate listing endpoint."""

    crates: list[Crate] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class User(RegistryModel):
    id: int
    login: str
    name: str | None = None
    avatar: str | None = None
    email: str | None = None
    url: str | None = None
    kind: str | None = None


class UserResponse(RegistryModel):
    user: User


class Owners(RegistryModel):
    users: list[User] = Field(default_factory=list)


class VersionLinks(RegistryModel):
    authors: str | None = None
    dependencies: str | None = None
    version_downloads: str | None = None


class Version(RegistryModel):
    """A published version of a crate."""

    id: int
    crate_name: str = Field(alias="crate")
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
    crate_size: int | None = None
    published_by: User | None = None


class CrateResponse(RegistryModel):
    """Detail view of a single crate, including every version."""

    crate_data: Crate = Field(alias="crate")
    versions: list[Version] = Field(default_factory=list)
    keywords: list[Keyword] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)


class VersionDownloads(RegistryModel):
    version: int
    downloads: int
    date: dt.date


class ExtraDownloads(RegistryModel):
    downloads: int
    date: dt.date


class DownloadsMeta(RegistryModel):
    extra_downloads: list[ExtraDownloads] = Field(default_factory=list)


class CrateDownloads(RegistryModel):
    """Per-day download counts for the recent versions of a crate."""

    version_downloads: list[VersionDownloads] = Field(default_factory=list)
    meta: DownloadsMeta = Field(default_factory=DownloadsMeta)


class AuthorsMeta(RegistryModel):
    names: list[str] = Field(default_factory=list)


class AuthorsResponse(RegistryModel):
    meta: AuthorsMeta = Field(default_factory=AuthorsMeta)


class Authors(RegistryModel):
    names: list[str] = Field(default_factory=list)


class Dependency(RegistryModel):
    """A dependency edge declared by a specific version."""

    id: int
    version_id: int
    crate_id: str
    req: str
    optional: bool = False
    default_features: bool = True
    features: list[str] = Field(default_factory=list)
    target: str | None = None
    kind: str = "normal"
    downloads: int = 0


class Dependencies(RegistryModel):
    dependencies: list[Dependency] = Field(default_factory=list)


class ReverseDependenciesPage(RegistryModel):
    """Reverse dependency page exactly as the registry returns it.

    Dependencies reference their dependent version by id; the versions are
    sent alongside in a separate list.
    """

    dependencies: list[Dependency] = Field(default_factory=list)
    versions: list[Version] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class ReverseDependency(RegistryModel):
    crate_version: Version
    dependency: Dependency


class ReverseDependencies(RegistryModel):
    """Reverse dependencies joined with the versions that declare them."""

    dependencies: list[ReverseDependency] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)

    def extend(self, page: ReverseDependenciesPage) -> None:
        """Append the dependencies of a received page, joined to their versions.

        Dependencies whose version is missing from the page are skipped.
        """
        versions = {version.id: version for version in page.versions}
        for dependency in page.dependencies:
            version = versions.get(dependency.version_id)
            if version is None:
                continue
            self.dependencies.append(
                ReverseDependency(crate_version=version, dependency=dependency)
            )


class Summary(RegistryModel):
    """Registry-wide statistics and highlighted crates."""

    num_crates: int = 0
    num_downloads: int = 0
    just_updated: list[Crate] = Field(default_factory=list)
    most_downloaded: list[Crate] = Field(default_factory=list)
    new_crates: list[Crate] = Field(default_factory=list)
    most_recently_downloaded: list[Crate] = Field(default_factory=list)
    popular_categories: list[Category] = Field(default_factory=list)
    popular_keywords: list[Keyword] = Field(default_factory=list)
