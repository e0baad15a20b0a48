from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# --- User ---

class UserBase(BaseModel):
    username: str = Field(max_length=100)
    email: str = Field(max_length=255)
    bio: str | None = None
    image: str | None = Field(None, max_length=500)


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    username: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    bio: str | None = None
    image: str | None = Field(None, max_length=500)


class UserResponse(UserBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


# --- Profile ---

class ProfileResponse(BaseModel):
    username: str
    bio: str | None = None
    image: str | None = None
    following: bool = False


# --- Comment ---

class CommentCreate(BaseModel):
    body: str = Field(min_length=1)


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field("", max_length=500)
    body: str
    # Accepts both the RealWorld "tagList" key and plain "tags".
    tags: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("tagList", "tags")
    )


class ArticleUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = Field(None, max_length=500)
    body: str | None = None
    tags: list[str] | None = Field(
        None, validation_alias=AliasChoices("tagList", "tags")
    )
