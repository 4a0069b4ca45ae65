"""Minimal Pydantic models for Jellyfin/Emby library item payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JellyfinBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class JellyfinUserData(JellyfinBaseModel):
    is_favorite: bool | None = Field(default=None, alias="IsFavorite")
    play_count: int | None = Field(default=None, alias="PlayCount")


class JellyfinArtist(JellyfinBaseModel):
    id: str = Field(alias="Id")
    name: str = Field(alias="Name")


class JellyfinAlbum(JellyfinBaseModel):
    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    album_artist: str | None = Field(default=None, alias="AlbumArtist")
    production_year: int | None = Field(default=None, alias="ProductionYear")


class JellyfinTrack(JellyfinBaseModel):
    id: str = Field(alias="Id")
    name: str = Field(default="", alias="Name")
    album_id: str | None = Field(default=None, alias="AlbumId")
    artists: list[str] = Field(default_factory=list[str], alias="Artists")
    genres: list[str] = Field(default_factory=list[str], alias="Genres")
    run_time_ticks: int | float | None = Field(default=None, alias="RunTimeTicks")
    index_number: int | None = Field(default=None, alias="IndexNumber")
    disc_number: int | None = Field(default=None, alias="DiscNumber")
    date_created: str | None = Field(default=None, alias="DateCreated")
    play_count: int | None = Field(default=None, alias="PlayCount")
    container: str | None = Field(default=None, alias="Container")
    user_data: JellyfinUserData | None = Field(default=None, alias="UserData")


class LibrarySnapshotPayload(JellyfinBaseModel):
    artists: list[JellyfinArtist] = Field(default_factory=list["JellyfinArtist"], alias="Artists")
    albums: list[JellyfinAlbum] = Field(default_factory=list["JellyfinAlbum"], alias="Albums")
    tracks: list[JellyfinTrack] = Field(default_factory=list["JellyfinTrack"], alias="Tracks")
