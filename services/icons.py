"""Icon URL resolution for category icons."""

from typing import Optional


class IconResolver:
    """Maps stored icon paths to URLs a client can display.

    Uploaded icons are stored as paths like ``/uploads/categories/x.png``
    and served by the API under ``/api/uploads/...``.

    Args:
        api_base_url: Base URL of the API serving static uploads.
    """

    def __init__(self, api_base_url: str):
        self.api_base_url = api_base_url.rstrip("/")

    def get_icon_url(self, icon_url: Optional[str]) -> Optional[str]:
        """Resolve a stored icon path.

        Args:
            icon_url: Stored icon path, absolute URL, or None.

        Returns:
            Displayable URL, or None when the category has no icon.
        """
        if not icon_url:
            return None
        if icon_url.startswith("http"):
            return icon_url

        path = icon_url if icon_url.startswith("/") else f"/{icon_url}"
        return f"{self.api_base_url}/api{path}"
