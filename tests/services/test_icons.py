from services.icons import IconResolver


class TestIconResolver:
    """Tests for IconResolver."""

    def test_none_and_empty(self):
        """Test none and empty."""
        resolver = IconResolver("http://localhost:3001")

        assert resolver.get_icon_url(None) is None
        assert resolver.get_icon_url("") is None

    def test_absolute_url_passes_through(self):
        """Test absolute url passes through."""
        resolver = IconResolver("http://localhost:3001")

        assert (
            resolver.get_icon_url("https://cdn.example.com/icon.png")
            == "https://cdn.example.com/icon.png"
        )

    def test_upload_path_served_under_api(self):
        """Test upload path served under api."""
        resolver = IconResolver("http://localhost:3001/")

        assert (
            resolver.get_icon_url("/uploads/categories/cnc.png")
            == "http://localhost:3001/api/uploads/categories/cnc.png"
        )

    def test_relative_path_gets_leading_slash(self):
        """Test relative path gets leading slash."""
        resolver = IconResolver("http://localhost:3001")

        assert (
            resolver.get_icon_url("uploads/categories/cnc.png")
            == "http://localhost:3001/api/uploads/categories/cnc.png"
        )

    def test_services_container_uses_configured_base_url(self, services):
        """Test services container uses configured base url."""
        assert services.icons.get_icon_url("/uploads/x.png") == "http://api.test/api/uploads/x.png"
