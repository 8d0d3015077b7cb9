from pydantic import BaseModel, Field


class Creator(BaseModel):
    """Schema for one creator of a bibliographic record."""

    last_name: str | None = Field(default=None)
    first_name: str | None = Field(default=None)
    name: str | None = Field(default=None)
    creator_type: str = Field(default='author')


class BibliographicRecord(BaseModel):
    """Schema for a bibliographic record whose citation count is resolved.

    ``extra`` is a newline-separated free-text field and the only place a
    resolved count is written back to.
    """

    key: str
    title: str | None = Field(default=None)
    doi: str | None = Field(default=None)
    url: str | None = Field(default=None)
    year: str | None = Field(default=None)
    date: str | None = Field(default=None)
    creators: list[Creator] = Field(default_factory=list)
    extra: str = Field(default='')
    is_feed_item: bool = Field(default=False)

    def get_field(self, name: str) -> str:
        """Return a text field, or an empty string when it is unset."""
        value = getattr(self, name, None)
        if value is None:
            return ''
        return str(value)

    @property
    def display_label(self) -> str:
        return self.title or self.key
