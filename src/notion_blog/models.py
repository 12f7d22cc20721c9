# ABOUTME: Post metadata records shared by the build step, the store and the API.
# ABOUTME: Serialises to the camelCase JSON layout of postMeta.json.

from dataclasses import dataclass, field
from typing import Literal, get_args

NotionColor = Literal["gray", "brown", "orange", "yellow", "green", "blue", "purple", "pink", "red"]

NOTION_COLORS: tuple[str, ...] = get_args(NotionColor)
DEFAULT_COLOR: NotionColor = "gray"
UNCATEGORIZED = "Uncategorized"


def validate_notion_color(color: str | None) -> NotionColor:
    """Return the color if Notion knows it, gray otherwise."""
    return color if color in NOTION_COLORS else DEFAULT_COLOR


@dataclass
class PostCategory:
    """Category label and its Notion select color."""
    text: str = UNCATEGORIZED
    color: NotionColor = DEFAULT_COLOR

    @classmethod
    def from_dict(cls, data: dict | None) -> "PostCategory":
        """Build a category from its JSON object; null or empty means uncategorized.

        Raises:
            ValueError: If the value is present but not an object.
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Category must be an object, got {type(data).__name__}")
        return cls(
            text=str(data.get("text") or UNCATEGORIZED),
            color=validate_notion_color(data.get("color")),
        )

    def to_dict(self) -> dict:
        return {"text": self.text, "color": self.color}


@dataclass
class PostMeta:
    """Metadata for one blog post, without its content blocks."""
    id: str
    title: str = ""
    description: str = ""
    created_at: str = ""
    last_edited_at: str = ""
    category: PostCategory = field(default_factory=PostCategory)
    tags: list[str] = field(default_factory=list)
    slug: str = ""
    cover: str = ""
    encoded_slug: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PostMeta":
        """Build a record from a postMeta.json entry.

        Only ``id`` is required; every other key falls back to an empty value.

        Raises:
            ValueError: If the entry is not an object or has no id.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Post entry must be an object, got {type(data).__name__}")
        if data.get("id") in (None, ""):
            raise ValueError("Post entry is missing 'id'")

        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError(f"Post '{data['id']}' has non-list tags")

        def text(key: str) -> str:
            value = data.get(key) or ""
            if not isinstance(value, str):
                raise ValueError(f"Post '{data['id']}' has non-string {key}")
            return value

        encoded_slug = data.get("encodedSlug")
        if encoded_slug is not None and not isinstance(encoded_slug, str):
            raise ValueError(f"Post '{data['id']}' has non-string encodedSlug")

        return cls(
            id=str(data["id"]),
            title=text("title"),
            description=text("description"),
            created_at=text("createdAt"),
            last_edited_at=text("lastEditedAt"),
            category=PostCategory.from_dict(data.get("category")),
            tags=[str(tag) for tag in tags],
            slug=text("slug"),
            cover=text("cover"),
            encoded_slug=encoded_slug,
        )

    def to_dict(self) -> dict:
        """Convert to the camelCase mapping written to postMeta.json."""
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdAt": self.created_at,
            "lastEditedAt": self.last_edited_at,
            "category": self.category.to_dict(),
            "tags": list(self.tags),
            "slug": self.slug,
            "cover": self.cover,
        }
        if self.encoded_slug is not None:
            data["encodedSlug"] = self.encoded_slug
        return data
