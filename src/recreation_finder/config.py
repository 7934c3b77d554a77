"""Configuration settings for the Recreation Finder application.

This module defines the configuration settings for the Recreation Finder application,
including RIDB API access, ZIP geocoding and search defaults. It uses Pydantic's
BaseSettings for environment variable management.
"""

from functools import lru_cache

from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RidbSettings(BaseModel):
    """Recreation Information Database (RIDB) API access.

    Attributes:
        api_key: The RIDB API key issued by recreation.gov.
        base_url: Root URL of the RIDB v1 REST API.
        page_size: Records requested per page (RIDB caps this at 50).
        max_records: Upper bound on records collected by a single paginated query.
        timeout: Request timeout in seconds.
        retries: Number of retries for transient HTTP failures.
        backoff_factor: Exponential backoff factor between retries.
    """

    api_key: str = Field(..., description="RIDB API key")
    base_url: str = Field("https://ridb.recreation.gov/api/v1", description="RIDB API root")
    page_size: int = Field(50, ge=1, le=50, description="Records per page")
    max_records: int = Field(5000, ge=1, description="Maximum records per paginated query")
    timeout: int = Field(30, description="Request timeout in seconds")
    retries: int = Field(4, ge=0, description="Number of retries for failed requests")
    backoff_factor: float = Field(2.0, ge=0, description="Backoff factor between retries")

    @computed_field
    def headers(self) -> dict[str, str]:
        """Return the headers dictionary.

        Returns:
            A dictionary containing the HTTP headers sent with every RIDB request.
        """
        return {
            "apikey": self.api_key,
            "accept": "application/json",
        }


class GeocoderSettings(BaseModel):
    """Settings for the ZIP code geocoder.

    Attributes:
        user_agent: User-Agent identifying this application to Nominatim.
        timeout: Geocoder request timeout in seconds.
        country: ISO country code that ZIP lookups are restricted to.
    """

    user_agent: str = Field("recreation-finder/0.1", description="Nominatim User-Agent")
    timeout: int = Field(10, description="Geocoder timeout in seconds")
    country: str = Field("us", description="Country code for postal code lookups")


class SearchSettings(BaseModel):
    """Defaults for the search form and facility table.

    Attributes:
        default_zip_code: ZIP code pre-filled in the search form.
        default_radius_miles: Search radius pre-filled in the search form.
        truncate_chars: Maximum characters shown per table cell.
    """

    default_zip_code: str = Field("37738", description="Default ZIP code")
    default_radius_miles: int = Field(25, ge=1, le=50, description="Default radius in miles")
    truncate_chars: int = Field(50, ge=4, description="Table cell truncation length")


class LoggingSettings(BaseModel):
    """Logging configuration settings.

    Attributes:
        level: The logging level (e.g., INFO, DEBUG).
        format: The log message format string.
    """

    level: str = Field("INFO", description="Logging level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )


class Settings(BaseSettings):
    """Global application settings.

    This class loads settings from environment variables (``RIDB__API_KEY``,
    ``LOGGING__LEVEL``, ...) and provides a structured access to them.

    Attributes:
        ridb: RIDB API configuration settings.
        geocoder: ZIP geocoder configuration settings.
        search: Search form defaults.
        logging: Logging configuration settings.
    """

    ridb: RidbSettings
    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the settings.

    Returns:
        The global Settings instance.
    """
    return Settings()
