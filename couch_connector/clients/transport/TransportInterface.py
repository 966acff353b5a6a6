from abc import ABC, abstractmethod
from typing import Any

from couch_connector.clients.transport.models.TransportResponse import TransportResponse
from couch_connector.helper.HelperConfig import HelperConfig
from couch_connector.models.config import EnvConfig

QueryParams = list[tuple[str, str]]


class TransportInterface(ABC):
    def __init__(self, helper_config: HelperConfig | None = None):
        helper_config = helper_config if helper_config is not None else HelperConfig()
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Validates that all required configuration values for the transport are set and valid.

        Raises:
            ValueError: If any required configuration value is missing or invalid.
        """
        for config in self._get_required_config():
            _ = self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """
        Returns the type of the client in lowercase. E.g. "couchdb"
        """
        return self._get_client_type().lower()

    def _get_client_type(self) -> str:
        return "couchdb"

    def get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the transport in lowercase. E.g. "httpx"
        """
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the transport. E.g. "Httpx"
        """
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns all required configurations for the transport.

        Returns:
            list[EnvConfig]: A list containing the details of each required configuration key.
        """
        pass

    def _get_config_key_name(self, raw_key: str) -> str:
        """
        Returns:
            str: The full configuration key name for the transport. E.g. "COUCHDB_HTTPX_USERNAME"
        """
        key_prefix = f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}"
        return f"{key_prefix}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Retrieves the value of a configuration key for the transport.

        Args:
            raw_key (str): The raw configuration key name
            default (Any): The default value to return if the configuration key is not set
            val_type (str): The type of the configuration value ("string", "number")
        """
        key = self._get_config_key_name(raw_key)
        if val_type == "string":
            return self._helper_config.get_string_val(key, default=default)
        elif val_type == "number":
            return self._helper_config.get_number_val(key, default=default)
        else:
            raise ValueError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in {self.get_client_type().upper()} transport '{self.get_engine_name()}'.")

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    def boot(self) -> None:
        """Initialise the underlying HTTP client. Transports without resources do nothing."""
        pass

    def close(self) -> None:
        """Release the underlying HTTP client."""
        pass

    def __enter__(self) -> "TransportInterface":
        self.boot()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        params: QueryParams | None = None,
        body: str | bytes | None = None,
    ) -> TransportResponse:
        """Send a single HTTP request and return the undecoded response.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE).
            url: Absolute request URL, already percent encoded.
            params: Query parameters as (key, value) pairs. Keys may repeat.
            body: JSON text to send as request body.

        Returns:
            TransportResponse: Status code, status message and raw body bytes.

        Raises:
            RuntimeError: If the transport has not been booted.
        """
        pass
