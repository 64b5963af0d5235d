import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_SMARTY_BASE_URL = "https://us-enrichment.api.smarty.com"
DEFAULT_NEARBY_SEARCH_RADIUS = 25


@dataclass(frozen=True)
class Settings:
    """
    Credentials and endpoints for the three data sources.

    Every field may be empty. An empty Google Maps key disables the places lookup and an
    empty registry connection string disables the registry lookup; neither is an error.
    """

    smarty_auth_id: str = ""
    smarty_auth_token: str = ""
    smarty_base_url: str = DEFAULT_SMARTY_BASE_URL
    google_maps_api_key: str = ""
    registry_connection_string: str = ""
    nearby_search_radius: int = DEFAULT_NEARBY_SEARCH_RADIUS

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            smarty_auth_id=os.getenv("SMARTY_AUTH_ID", ""),
            smarty_auth_token=os.getenv("SMARTY_AUTH_TOKEN", ""),
            smarty_base_url=os.getenv("SMARTY_BASE_URL", DEFAULT_SMARTY_BASE_URL),
            google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY", ""),
            registry_connection_string=os.getenv("NEON_CONNECTION_STRING", ""),
            nearby_search_radius=int(
                os.getenv("NEARBY_SEARCH_RADIUS", str(DEFAULT_NEARBY_SEARCH_RADIUS))
            ),
        )

    @property
    def registry_enabled(self) -> bool:
        return bool(self.registry_connection_string)

    @property
    def places_enabled(self) -> bool:
        return bool(self.google_maps_api_key)


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
