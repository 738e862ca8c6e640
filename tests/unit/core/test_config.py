"""Unit tests for PagingConfig."""

from __future__ import annotations

import pytest

from laakhay.paging.core import DEFAULT_PAGE_SIZE, ConfigurationError, PagingConfig


class TestPagingConfig:
    """Test PagingConfig validation and loading."""

    def test_defaults(self):
        """Test default values."""
        config = PagingConfig()
        assert config.default_page_size == DEFAULT_PAGE_SIZE == 24
        assert config.max_recorded_errors is None

    def test_rejects_non_positive_page_size(self):
        """Test that page size must be positive."""
        with pytest.raises(ConfigurationError, match="default_page_size"):
            PagingConfig(default_page_size=-1)

    def test_rejects_non_positive_error_bound(self):
        """Test that the error bound must be positive when set."""
        with pytest.raises(ConfigurationError, match="max_recorded_errors"):
            PagingConfig(max_recorded_errors=0)

    def test_is_frozen(self):
        """Test that config is immutable."""
        config = PagingConfig()
        with pytest.raises(AttributeError):
            config.default_page_size = 10  # type: ignore[misc]


class TestPagingConfigFromEnv:
    """Test PagingConfig.from_env."""

    def test_reads_prefixed_variables(self):
        """Test that prefixed variables override defaults."""
        config = PagingConfig.from_env(
            {
                "LAAKHAY_PAGING_DEFAULT_PAGE_SIZE": "50",
                "LAAKHAY_PAGING_MAX_RECORDED_ERRORS": "10",
            }
        )
        assert config.default_page_size == 50
        assert config.max_recorded_errors == 10

    def test_missing_variables_keep_defaults(self):
        """Test that unset or blank variables keep defaults."""
        config = PagingConfig.from_env({"LAAKHAY_PAGING_MAX_RECORDED_ERRORS": " "})
        assert config == PagingConfig()

    def test_custom_prefix(self):
        """Test reading with a custom prefix."""
        config = PagingConfig.from_env({"APP_DEFAULT_PAGE_SIZE": "12"}, prefix="APP_")
        assert config.default_page_size == 12

    def test_rejects_non_integer(self):
        """Test that a non-integer value raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="must be an integer") as exc_info:
            PagingConfig.from_env({"LAAKHAY_PAGING_DEFAULT_PAGE_SIZE": "many"})
        assert exc_info.value.field == "default_page_size"

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch):
        """Test that os.environ is used by default."""
        monkeypatch.setenv("LAAKHAY_PAGING_DEFAULT_PAGE_SIZE", "7")
        assert PagingConfig.from_env().default_page_size == 7
