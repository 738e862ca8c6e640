"""Engine configuration.

Both engines accept an optional ``PagingConfig``. Defaults match the
behaviour of an unconfigured engine: 24 items per page and an unbounded
error list.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigurationError

DEFAULT_PAGE_SIZE = 24
ENV_PREFIX = "LAAKHAY_PAGING_"


@dataclass(frozen=True)
class PagingConfig:
    """Tunables shared by Paging and Chunking.

    Attributes:
        default_page_size: Page size of the initial Paging query and the
            default ``limit`` for Chunking fetches
        max_recorded_errors: Maximum number of errors kept in an engine's
            error list (None = unbounded, oldest dropped first when set)
    """

    default_page_size: int = DEFAULT_PAGE_SIZE
    max_recorded_errors: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.default_page_size <= 0:
            raise ConfigurationError(
                f"default_page_size must be positive, got {self.default_page_size}",
                field="default_page_size",
            )
        if self.max_recorded_errors is not None and self.max_recorded_errors <= 0:
            raise ConfigurationError(
                f"max_recorded_errors must be positive, got {self.max_recorded_errors}",
                field="max_recorded_errors",
            )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = ENV_PREFIX,
    ) -> PagingConfig:
        """Build a config from environment variables.

        Reads ``<prefix>DEFAULT_PAGE_SIZE`` and ``<prefix>MAX_RECORDED_ERRORS``.
        Unset variables keep their defaults.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            prefix: Variable name prefix

        Returns:
            PagingConfig built from the environment

        Raises:
            ConfigurationError: If a variable is not an integer or out of range
        """
        env = os.environ if environ is None else environ

        def _int(name: str) -> int | None:
            raw = env.get(f"{prefix}{name}")
            if raw is None or raw.strip() == "":
                return None
            try:
                return int(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"{prefix}{name} must be an integer, got {raw!r}",
                    field=name.lower(),
                ) from e

        page_size = _int("DEFAULT_PAGE_SIZE")
        return cls(
            default_page_size=DEFAULT_PAGE_SIZE if page_size is None else page_size,
            max_recorded_errors=_int("MAX_RECORDED_ERRORS"),
        )
