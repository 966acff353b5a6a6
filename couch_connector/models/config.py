from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required by a transport engine.

    Attributes:
        env_key (str): The raw key of the environment variable to read. It is prefixed with the client type and engine name, e.g. "USERNAME" -> "COUCHDB_HTTPX_USERNAME".
        val_type (str): The expected type of the environment variable's value. Supported types are "string" and "number".
        default (str | int | float | None): An optional default value if the environment variable is not set. If None, the variable is required and an error will be raised if it is not set.
    """

    env_key: str
    val_type: str
    default: str | int | float | None = None
