import datetime

from pydantic import BaseModel, ConfigDict, Field as ModelField

from mapjournal.entities import BaseEntity, Field, MarkerColor, SchemaBase


class PostSchema(SchemaBase):
    id = Field[int]("id")
    user_id = Field[int]("user_id")
    latitude = Field[float]("latitude")
    longitude = Field[float]("longitude")
    title = Field[str]("title")
    color = Field[MarkerColor]("color")
    address = Field[str]("address")
    date = Field[datetime.date]("date")
    description = Field[str]("description")
    score = Field[float]("score")


class ImageSchema(SchemaBase):
    id = Field[int]("id")
    post_id = Field[int]("post_id")
    uri = Field[str]("uri")


class FavoriteSchema(SchemaBase):
    id = Field[int]("id")
    post_id = Field[int]("post_id")
    user_id = Field[int]("user_id")


# Stored rows
class PostRow(BaseEntity):
    user_id: int
    latitude: float
    longitude: float
    title: str
    color: MarkerColor
    address: str
    date: datetime.date
    description: str
    score: float


class ImageRow(BaseEntity):
    post_id: int
    uri: str


class FavoriteRow(BaseEntity):
    post_id: int
    user_id: int


class Post(PostRow):
    """A post together with its images, as handed from the store to the mapper"""

    images: list[ImageRow] = []


# Inputs
class AuthUser(BaseModel):
    """Identity resolved by the session layer; trusted as given"""

    id: int
    email: str


class ImageInput(BaseModel):
    uri: str


class PostCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    latitude: float
    longitude: float
    title: str
    color: MarkerColor
    address: str
    date: datetime.date
    description: str
    score: float
    image_uris: list[ImageInput] = ModelField(default_factory=list)


class PostUpdate(BaseModel):
    """Editable post fields. Location (latitude, longitude, address) is fixed at creation."""

    model_config = ConfigDict(extra="forbid")

    title: str
    color: MarkerColor
    date: datetime.date
    description: str
    score: float
    image_uris: list[ImageInput] = ModelField(default_factory=list)


class PostRowUpdate(BaseModel):
    """Column values written by an update"""

    title: str | None = None
    color: MarkerColor | None = None
    date: datetime.date | None = None
    description: str | None = None
    score: float | None = None
