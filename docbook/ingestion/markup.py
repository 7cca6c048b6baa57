"""Helpers for reading converter-produced markup fragments."""

from bs4 import BeautifulSoup, Tag


def parse_fragment(markup: str) -> Tag:
    """Parse a markup fragment and return its wrapping container element.

    The fragment is wrapped in a ``<div>`` so that its top-level nodes
    become the container's direct children. ``html.parser`` keeps
    attribute values of any length, including large inline base64 images.

    Args:
        markup: HTML fragment, typically produced by the document converter.

    Returns:
        The wrapping ``div`` Tag.
    """
    soup = BeautifulSoup(f"<div>{markup}</div>", "html.parser")
    return soup.find("div")


def top_level_elements(container: Tag) -> list[Tag]:
    """Return the element children of a container, skipping text and comments."""
    return [child for child in container.children if isinstance(child, Tag)]
