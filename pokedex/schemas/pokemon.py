from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PokemonReference(BaseModel):
    """Raw ``{name, url}`` record returned by the list endpoint."""

    model_config = ConfigDict(extra="ignore")

    name: str
    url: str


class PokemonListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[PokemonReference] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_count(self) -> "PokemonListResponse":
        # Some mirrors omit ``count``; fall back to the page size.
        if "count" not in self.model_fields_set:
            self.count = len(self.results)
        return self


class OfficialArtwork(BaseModel):
    model_config = ConfigDict(extra="ignore")

    front_default: str | None = None


class OtherSprites(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    official_artwork: OfficialArtwork | None = Field(
        default=None, alias="official-artwork"
    )


class PokemonSprites(BaseModel):
    model_config = ConfigDict(extra="ignore")

    front_default: str | None = None
    other: OtherSprites | None = None


class NamedResource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    url: str | None = None


class PokemonTypeSlot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    slot: int | None = None
    type: NamedResource


class PokemonDetailResponse(BaseModel):
    """Subset of the raw detail payload consumed by the client."""

    model_config = ConfigDict(extra="ignore")

    name: str
    height: int
    weight: int
    sprites: PokemonSprites = Field(default_factory=PokemonSprites)
    types: list[PokemonTypeSlot] = Field(default_factory=list)

    @property
    def official_artwork_url(self) -> str | None:
        """Return the front-facing official artwork URL when every level exists."""

        other = self.sprites.other
        if other is None or other.official_artwork is None:
            return None
        return other.official_artwork.front_default

    @property
    def type_names(self) -> list[str]:
        return [slot.type.name for slot in self.types]


class PokemonListItem(BaseModel):
    """Catalogue row: a raw reference decorated with the favorite flag."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    url: str
    favorite: bool = False


class PokemonDetail(BaseModel):
    """Expanded record for the currently selected Pokémon."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    height: int
    weight: int
    image_url: str | None = None
    types: list[str] = Field(default_factory=list)
    favorite: bool = False
