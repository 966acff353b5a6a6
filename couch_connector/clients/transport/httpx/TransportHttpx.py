import httpx

from couch_connector.clients.transport.TransportInterface import QueryParams, TransportInterface
from couch_connector.clients.transport.models.TransportResponse import TransportResponse
from couch_connector.helper.HelperConfig import HelperConfig
from couch_connector.models.config import EnvConfig


class TransportHttpx(TransportInterface):
    def __init__(self, helper_config: HelperConfig | None = None, transport: httpx.BaseTransport | None = None):
        super().__init__(helper_config=helper_config)
        self._username = self.get_config_val("USERNAME", default="", val_type="string")
        self._password = self.get_config_val("PASSWORD", default="", val_type="string")

        # an explicit httpx transport replaces the network, e.g. httpx.MockTransport in tests
        self._transport = transport
        self._client: httpx.Client | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Httpx"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="USERNAME", val_type="string", default=""),
            EnvConfig(env_key="PASSWORD", val_type="string", default="")
        ]

    ################ AUTH ##################
    def _get_auth(self) -> httpx.BasicAuth | None:
        if self._username and self._password:
            return httpx.BasicAuth(self._username, self._password)
        else:
            return None

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    def boot(self) -> None:
        """Initialise the httpx client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, auth=self._get_auth(), transport=self._transport)

    def close(self) -> None:
        """Close the httpx client."""
        if self._client:
            self._client.close()
            self._client = None

    def send(
        self,
        method: str,
        url: str,
        params: QueryParams | None = None,
        body: str | bytes | None = None,
    ) -> TransportResponse:
        if self._client is None:
            raise RuntimeError("HTTP client not initialised. Call boot() before making requests.")

        headers: dict = {"Accept": "application/json"}
        kwargs: dict = {"headers": headers}
        if params:
            kwargs["params"] = params
        if body is not None:
            # CouchDB requires a JSON content type on document writes
            headers["Content-Type"] = "application/json"
            kwargs["content"] = body.encode("utf-8") if isinstance(body, str) else body

        response = self._client.request(method.upper(), url, **kwargs)
        self.logging.debug("%s %s -> %d", method.upper(), response.request.url, response.status_code)

        return TransportResponse(
            status=response.status_code,
            message=response.reason_phrase,
            raw_body=response.content,
        )
