"""Administration schemas."""

from typing import Optional

from app.models.schemas.base import CamelModel


class IndexerConfigDTO(CamelModel):
    """Search-engine settings, without secrets."""

    server_uri: Optional[str] = None
    number_of_shards: int
    number_of_replicas: int
    auto_expand_replicas: Optional[str] = None
    username: Optional[str] = None
    has_password: bool = False
    aws_signing: bool = False
    aws_service: Optional[str] = None
    aws_region: Optional[str] = None
