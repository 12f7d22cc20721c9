# ABOUTME: Maps Notion page properties onto PostMeta fields.
# ABOUTME: Every accessor tolerates missing or mistyped properties and returns a neutral default.

from ..models import PostCategory, PostMeta, validate_notion_color


def _typed(props: dict, name: str, prop_type: str) -> dict | None:
    """Return the property if it exists and has the expected type."""
    prop = props.get(name)
    if prop and prop.get("type") == prop_type:
        return prop
    return None


def first_plain_text(rich_text: list[dict] | None) -> str:
    """Plain text of the first rich text segment."""
    if not rich_text:
        return ""
    return rich_text[0].get("plain_text") or ""


def get_title(props: dict) -> str:
    prop = _typed(props, "title", "title")
    return first_plain_text(prop["title"]) if prop else ""


def get_description(props: dict) -> str:
    prop = _typed(props, "description", "rich_text")
    return first_plain_text(prop["rich_text"]) if prop else ""


def get_category(props: dict) -> PostCategory:
    prop = _typed(props, "category", "select")
    if prop and prop.get("select"):
        select = prop["select"]
        return PostCategory(text=select.get("name", ""), color=validate_notion_color(select.get("color")))
    return PostCategory()


def get_tags(props: dict) -> list[str]:
    # Databases name this property either 'tag' or 'tags'
    prop = props.get("tag") or props.get("tags")
    if prop and prop.get("type") == "multi_select":
        return [tag["name"] for tag in prop.get("multi_select", [])]
    return []


def get_cover(props: dict) -> str:
    """URL of the first file in the 'cover' files property.

    The page-level cover is ignored.
    """
    prop = _typed(props, "cover", "files")
    if not prop or not prop.get("files"):
        return ""
    file = prop["files"][0]
    if "file" in file:
        return file["file"].get("url") or ""
    if "external" in file:
        return file["external"].get("url") or ""
    return ""


def get_slug(props: dict) -> str:
    prop = props.get("slug")
    if not prop:
        return ""
    if "formula" in prop:
        return prop["formula"].get("string") or ""
    if prop.get("type") == "rich_text":
        return first_plain_text(prop.get("rich_text"))
    return ""


def page_to_post_meta(page: dict) -> PostMeta:
    """Convert a Notion page object into a PostMeta record.

    Created/edited timestamps come from the database's own timestamp
    properties when present, falling back to the page's metadata.
    """
    props = page.get("properties") or {}

    created = _typed(props, "createdAt", "created_time")
    edited = _typed(props, "lastEditedAt", "last_edited_time")

    return PostMeta(
        id=page["id"],
        title=get_title(props),
        description=get_description(props),
        created_at=created["created_time"] if created else page.get("created_time", ""),
        last_edited_at=edited["last_edited_time"] if edited else page.get("last_edited_time", ""),
        category=get_category(props),
        tags=get_tags(props),
        slug=get_slug(props),
        cover=get_cover(props),
    )
