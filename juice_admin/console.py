"""
Console - Assemblage

Construit et relie explicitement les composants de la console:
aucun objet global, chaque consommateur reçoit ses instances.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Union

import httpx

from .api import AdminApi
from .auth import (
    IKeyValueStore,
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
    Session,
    SessionManager,
    TokenStore,
)
from .core import ConfigChecker, ConfigError, ConfigLoader, ConsoleConfig, LoggingSettings
from .logging import FileOutputHandler, LogConfig, StructuredLogger, console_output_handler
from .network import (
    RequestPipeline,
    RetryConfig,
    RetryHandler,
    TimeoutConfig,
    TimeoutManager,
    build_async_client,
)
from .validation import ValidationEngine


def build_output_handler(settings: LoggingSettings) -> Optional[Callable[[str], None]]:
    """
    Sortie des logs selon la configuration.

    Returns:
        None si aucune sortie activée (capture en mémoire seule)
    """
    handlers: List[Callable[[str], None]] = []
    if settings.enable_console:
        handlers.append(console_output_handler)
    if settings.enable_file:
        handlers.append(FileOutputHandler(settings.log_file))

    if not handlers:
        return None
    if len(handlers) == 1:
        return handlers[0]

    def fan_out(line: str) -> None:
        for handler in handlers:
            handler(line)

    return fan_out


class AdminConsole:
    """
    Racine de composition de la console d'administration.

    Example:
        async with AdminConsole.create(config) as console:
            result = await console.session.login({"login": "admin", "password": "secret"})
            if result.success:
                await console.api.delete_product(42)
    """

    def __init__(
        self,
        config: ConsoleConfig,
        logger: StructuredLogger,
        token_store: TokenStore,
        client: httpx.AsyncClient,
        pipeline: RequestPipeline,
        api: AdminApi,
        validator: ValidationEngine,
        session: SessionManager,
    ) -> None:
        self.config = config
        self.logger = logger
        self.token_store = token_store
        self.client = client
        self.pipeline = pipeline
        self.api = api
        self.validator = validator
        self.session = session

    @classmethod
    def create(
        cls,
        config: Optional[ConsoleConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        key_value_store: Optional[IKeyValueStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "AdminConsole":
        """
        Construit tous les composants à partir de la configuration.

        Args:
            config: Configuration (défauts si None)
            transport: Transport HTTP alternatif (tests)
            key_value_store: Persistance du token (sinon selon config.storage)
            clock: Source de temps UTC
        """
        config = config or ConsoleConfig()

        logger = StructuredLogger(
            "juice_admin",
            config=LogConfig(min_level=config.logging.level, max_entries=config.logging.max_entries),
            output_handler=build_output_handler(config.logging),
        )

        if key_value_store is None:
            if config.storage.backend == "file":
                key_value_store = JsonFileKeyValueStore(config.storage.path)
            else:
                key_value_store = MemoryKeyValueStore()

        token_store = TokenStore(
            key_value_store,
            storage_key=config.jwt.storage_key,
            logger=logger.child("token_store"),
        )

        timeout_manager = TimeoutManager(
            TimeoutConfig(
                connection_timeout=min(config.api.timeout_seconds, TimeoutManager.MAX_CONNECTION_TIMEOUT),
                request_timeout=config.api.timeout_seconds,
            )
        )
        retry_handler = RetryHandler(
            RetryConfig(
                max_attempts=config.api.retry_attempts,
                initial_delay=config.api.retry_delay_seconds,
            )
        )

        client = build_async_client(config.api, transport=transport)
        pipeline = RequestPipeline(
            token_store,
            client,
            timeout_manager=timeout_manager,
            retry_handler=retry_handler,
            logger=logger.child("pipeline"),
            header_prefix=config.jwt.header_prefix,
        )
        api = AdminApi(pipeline, token_store, logger=logger.child("api"))
        validator = ValidationEngine(limits=config.validation)
        session = SessionManager(
            token_store,
            gateway=api,
            validator=validator,
            refresh_threshold_hours=config.jwt.refresh_threshold_hours,
            clock=clock,
            logger=logger.child("session"),
        )
        pipeline.bind_session_manager(session)

        return cls(config, logger, token_store, client, pipeline, api, validator, session)

    @classmethod
    async def load(
        cls,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> "AdminConsole":
        """
        Charge, vérifie puis assemble.

        Raises:
            ConfigError: Configuration illisible ou règle bloquante violée
        """
        config = await ConfigLoader(config_path, environ=environ).load()
        result = ConfigChecker().check(config)
        if not result.valid:
            first = result.errors[0]
            raise ConfigError("; ".join(result.messages), location=first.location)

        console = cls.create(config, **kwargs)
        for warning in result.warnings:
            console.logger.warn(warning.message, rule_id=warning.rule_id, location=warning.location)
        return console

    async def start(self) -> Optional[Session]:
        """Restaure la session persistée (une fois au démarrage)."""
        self.logger.info("Console starting", environment=self.config.environment, base_url=self.config.api.base_url)
        return await self.session.restore()

    async def close(self) -> None:
        await self.client.aclose()
        self.logger.info("Console closed")

    async def __aenter__(self) -> "AdminConsole":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
