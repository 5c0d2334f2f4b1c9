from __future__ import annotations

from dataclasses import dataclass

from vaultpreview.app.core.config import Settings, settings as default_settings
from vaultpreview.services.content_proxy.gateway import ContentProxyGateway, GatewayOptions
from vaultpreview.services.grant_connection import GrantConnection, create_grant_connection


@dataclass
class AppDependencies:
    grant_connection: GrantConnection
    content_gateway: ContentProxyGateway


def create_dependencies(config: Settings | None = None) -> AppDependencies:
    cfg = config or default_settings

    grant_conn = create_grant_connection(
        base_url=cfg.GRANT_SERVICE_BASE_URL,
        download_path=cfg.GRANT_DOWNLOAD_PATH,
        timeout_s=cfg.GRANT_TIMEOUT_S,
        config_path=cfg.GRANT_CONFIG_PATH,
    )
    gateway = ContentProxyGateway(
        grant_conn.client,
        options=GatewayOptions(
            preview_expires_minutes=cfg.PREVIEW_GRANT_EXPIRES_MINUTES,
            cache_max_age_s=cfg.PREVIEW_CACHE_MAX_AGE_S,
            content_timeout_s=cfg.CONTENT_TIMEOUT_S,
            chunk_size=cfg.STREAM_CHUNK_SIZE,
        ),
    )
    return AppDependencies(grant_connection=grant_conn, content_gateway=gateway)
