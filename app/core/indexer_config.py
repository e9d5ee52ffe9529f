"""Typed access to the search-engine (Elasticsearch) configuration.

The configuration is a flat properties bag using the historical key names
(``number_of_shards``, ``serverUri``, ``awsAccessKey``...). By default it is
built from the ``ELASTICSEARCH_*`` settings.
"""

from typing import Any, Dict, Mapping, Optional

from app.core.config import settings
from app.core.exceptions import IndexerConfigurationError


class IndexerConfigManager:
    """Read-only accessor over the indexer properties."""

    def __init__(self, properties: Optional[Mapping[str, str]] = None):
        self.properties: Dict[str, str] = dict(
            settings.elasticsearch_properties if properties is None else properties
        )

    def _get_int(self, name: str) -> int:
        value = self.properties.get(name)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise IndexerConfigurationError(name, details={"property": name, "value": value})

    def get_number_of_shards(self) -> int:
        return self._get_int("number_of_shards")

    def get_number_of_replicas(self) -> int:
        return self._get_int("number_of_replicas")

    def get_auto_expand_replicas(self) -> Optional[str]:
        return self.properties.get("auto_expand_replicas")

    def get_server_uri(self) -> Optional[str]:
        return self.properties.get("serverUri")

    def get_user_name(self) -> Optional[str]:
        return self.properties.get("username")

    def get_password(self) -> Optional[str]:
        return self.properties.get("password")

    def get_aws_service(self) -> Optional[str]:
        return self.properties.get("awsService")

    def get_aws_region(self) -> Optional[str]:
        return self.properties.get("awsRegion")

    def get_aws_access_key(self) -> Optional[str]:
        return self.properties.get("awsAccessKey")

    def get_aws_secret_key(self) -> Optional[str]:
        return self.properties.get("awsSecretKey")

    @property
    def uses_aws_signing(self) -> bool:
        """Requests are SigV4-signed only when every AWS parameter is set."""
        return all(
            (
                self.get_aws_service(),
                self.get_aws_region(),
                self.get_aws_access_key(),
                self.get_aws_secret_key(),
            )
        )

    def index_settings(self) -> Dict[str, Any]:
        """Body of the settings section used when creating an index."""
        index: Dict[str, Any] = {
            "number_of_shards": self.get_number_of_shards(),
            "number_of_replicas": self.get_number_of_replicas(),
        }
        auto_expand = self.get_auto_expand_replicas()
        if auto_expand:
            index["auto_expand_replicas"] = auto_expand
        return {"index": index}


# Global instance built from settings
indexer_config = IndexerConfigManager()
