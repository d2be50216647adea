"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is
            only used for non-database settings.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryService
        from services.icons import IconResolver

        self.categories = CategoryService(self.db_manager)
        self.icons = IconResolver(config.api_base_url)
