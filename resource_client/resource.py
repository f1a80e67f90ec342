from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .data import ResponseData
from .errors import ParseClientError, RequestFailedError, ValidationClientError
from .http_client import ResourceHttpClient
from .logger import Log
from .resource_error import ResourceError

PayloadValidator = Callable[[ResponseData], None]


class Resource:
    """Latest known state of one remote URL.

    A successful load replaces ``latest_data`` and clears ``latest_error``; a
    failed load records ``latest_error`` and keeps the previous data.
    """

    def __init__(
        self,
        client: ResourceHttpClient,
        url: str,
        validator: PayloadValidator | None = None,
    ):
        self.client = client
        self.url = url
        self.validator = validator

        self.latest_data: ResponseData | None = None
        self.latest_error: ResourceError | None = None
        self.is_loading = False

    async def load(self, **request_kwargs: Any) -> ResponseData:
        self.is_loading = True
        try:
            response = await self.client.request("GET", self.url, **request_kwargs)
            data = ResponseData.from_response(response, response.content)

            if self.validator is not None:
                try:
                    self.validator(data)
                except ValidationClientError as exc:
                    raise RequestFailedError(
                        ResourceError.from_response(response, response.content, exc)
                    ) from exc
                except ValueError as exc:
                    # Validators that decode the payload themselves surface decode errors here.
                    parse_error = ParseClientError("The server response could not be read.")
                    parse_error.__cause__ = exc
                    raise RequestFailedError(
                        ResourceError.from_response(response, response.content, parse_error)
                    ) from exc
                except (LookupError, TypeError) as exc:
                    shape_error = ValidationClientError("The server response did not have the expected shape.")
                    shape_error.__cause__ = exc
                    raise RequestFailedError(
                        ResourceError.from_response(response, response.content, shape_error)
                    ) from exc
        except RequestFailedError as failure:
            self.latest_error = failure.error
            Log.info(f"Resource failed to load: {failure.error.user_message}", method="GET", url=self.url)
            raise
        finally:
            self.is_loading = False

        self.latest_data = data
        self.latest_error = None
        return data
