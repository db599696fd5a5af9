from __future__ import annotations

from typing import Optional


# -----------------------------------------------------------------------------
# Configuration errors: fatal, surfaced immediately, never retried
# -----------------------------------------------------------------------------

class ConfigError(RuntimeError):
    pass


class ClassifierConfigError(ConfigError):
    pass


class EmailNotConfigured(ConfigError):
    pass


class StorageNotConfigured(ConfigError):
    pass


class ReferenceDataError(ConfigError):
    """Bundled reference table is missing or malformed."""


# -----------------------------------------------------------------------------
# Not-found errors
# -----------------------------------------------------------------------------

class NotFoundError(RuntimeError):
    pass


class PaletteNotFound(NotFoundError):
    def __init__(self, palette_id: int):
        super().__init__(f"palette_not_found:{palette_id}")
        self.palette_id = palette_id


class ReferenceNotFound(NotFoundError):
    def __init__(self, season: str, sub_season: Optional[str] = None):
        key = f"{season}/{sub_season}" if sub_season else season
        super().__init__(f"reference_not_found:{key}")
        self.season = season
        self.sub_season = sub_season


# -----------------------------------------------------------------------------
# Upstream / validation errors
# -----------------------------------------------------------------------------

class UpstreamError(RuntimeError):
    pass


class ClassificationFailed(UpstreamError):
    def __init__(self, error_code: str, error_message: str = ""):
        super().__init__(f"{error_code}: {error_message}" if error_message else error_code)
        self.error_code = error_code
        self.error_message = error_message


class EmailDeliveryError(UpstreamError):
    pass
