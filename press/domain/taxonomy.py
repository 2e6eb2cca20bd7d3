"""Author and tag entities referenced by documents."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Author:
    """A byline. Authors do not own documents; documents refer to them by id."""

    id: str
    display_name: str
    bio: str | None = None
    avatar: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "bio": self.bio,
            "avatar": self.avatar,
        }


@dataclass(frozen=True, slots=True)
class Tag:
    """A tag with its normalized identifier and display label."""

    id: str
    label: str

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label}
