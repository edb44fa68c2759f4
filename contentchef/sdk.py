"""
ContentChef SDK - channels on top of the core APIClient.

Online channels return live content only; preview channels return content in
the live or staging state, optionally as it will look at a target date.
"""

import urllib.parse
from dataclasses import dataclass, field
from datetime import datetime

from contentchef.core.client import APIClient, TargetDateResolver, Transport
from contentchef.core.context import Context
from contentchef.core.errors import ConfigurationError
from contentchef.core.types import (
    ContentOptions,
    ContentResponse,
    PaginatedResponse,
    SearchOptions,
    TargetDateOptions,
)

PREVIEW_STATES = ("live", "staging")


def _segment(value: str, safe: str = "") -> str:
    # method names such as search/v2 keep their slash
    return urllib.parse.quote(value, safe=safe)


def get_online_endpoint(space_id: str, method: str, channel: str) -> str:
    """Relative URL of an online channel endpoint."""
    return f"/space/{_segment(space_id)}/online/{_segment(method, safe='/')}/{_segment(channel)}"


def get_preview_endpoint(space_id: str, state: str, method: str, channel: str) -> str:
    """Relative URL of a preview channel endpoint."""
    return (
        f"/space/{_segment(space_id)}/preview/{_segment(state)}"
        f"/{_segment(method, safe='/')}/{_segment(channel)}"
    )


def _check_channel(name: str, api_key: str) -> None:
    if not name:
        raise ConfigurationError("Channel name must not be empty")
    if not api_key:
        raise ConfigurationError("Channel API key must not be empty")


@dataclass(frozen=True)
class OnlineChannel:
    """Retrieves contents that are live now."""

    client: APIClient
    name: str
    api_key: str = field(repr=False)

    def __post_init__(self) -> None:
        _check_channel(self.name, self.api_key)

    def content(self, ctx: Context | None, options: ContentOptions | None) -> ContentResponse:
        """
        Retrieve a single content by its publicId.

        Args:
            ctx: Call context
            options: Content options

        Returns:
            The content

        """
        path = get_online_endpoint(self.client.space_id, "content", self.name)
        return self.client.get(ctx, path, self.api_key, options, ContentResponse.from_dict)

    def search(self, ctx: Context | None, options: SearchOptions | None) -> PaginatedResponse:
        """
        Search contents by definition, repository, tags, property filters and more.

        Args:
            ctx: Call context
            options: Search options

        Returns:
            One page of results

        """
        path = get_online_endpoint(self.client.space_id, "search/v2", self.name)
        return self.client.get(ctx, path, self.api_key, options, PaginatedResponse.from_dict)


@dataclass(frozen=True)
class PreviewChannel:
    """Retrieves contents in the live or staging state, optionally at the client's target date."""

    client: APIClient
    name: str
    api_key: str = field(repr=False)
    state: str = "live"

    def __post_init__(self) -> None:
        _check_channel(self.name, self.api_key)
        if self.state not in PREVIEW_STATES:
            raise ConfigurationError(f"State must be either 'live' or 'staging', got {self.state!r}")

    def _with_target_date(self, options: ContentOptions | SearchOptions | None) -> TargetDateOptions:
        return TargetDateOptions(options=options, target_date=self.client.resolve_target_date())

    def content(self, ctx: Context | None, options: ContentOptions | None) -> ContentResponse:
        """
        Retrieve a single content by its publicId.

        Args:
            ctx: Call context
            options: Content options

        Returns:
            The content

        """
        path = get_preview_endpoint(self.client.space_id, self.state, "content", self.name)
        return self.client.get(ctx, path, self.api_key, self._with_target_date(options), ContentResponse.from_dict)

    def search(self, ctx: Context | None, options: SearchOptions | None) -> PaginatedResponse:
        """
        Search contents by definition, repository, tags, property filters and more.

        Args:
            ctx: Call context
            options: Search options

        Returns:
            One page of results

        """
        path = get_preview_endpoint(self.client.space_id, self.state, "search/v2", self.name)
        return self.client.get(ctx, path, self.api_key, self._with_target_date(options), PaginatedResponse.from_dict)


class ContentChef:
    """
    High-level ContentChef client.

    Example:
        chef = ContentChef(base_url="https://api.contentchef.io", space_id="my-space")
        channel = chef.online_channel("website", "online-api-key")

        ctx = Context.with_timeout(10)
        home = channel.content(ctx, ContentOptions(public_id="home"))
        page = channel.search(ctx, SearchOptions(take=10, content_definition=["article"]))

    """

    def __init__(
        self,
        base_url: str | None = None,
        space_id: str | None = None,
        transport: Transport | None = None,
        target_date: datetime | None = None,
        target_date_resolver: TargetDateResolver | None = None,
        timeout: float = 60,
    ):
        """
        Initialize the ContentChef client.

        Args:
            base_url: API base URL (or CONTENTCHEF_BASE_URL env var)
            space_id: Space ID (or CONTENTCHEF_SPACE_ID env var)
            transport: Custom transport, defaults to a urllib opener
            target_date: Date at which preview channels look at content
            target_date_resolver: Callable returning the preview target date as ISO-8601
            timeout: Default timeout in seconds for background_context()

        """
        self._client = APIClient(
            base_url=base_url,
            space_id=space_id,
            transport=transport,
            target_date=target_date,
            target_date_resolver=target_date_resolver,
            timeout=timeout,
        )

    @property
    def client(self) -> APIClient:
        return self._client

    @property
    def space_id(self) -> str:
        """Get the space ID."""
        return self._client.space_id

    def background_context(self) -> Context:
        """A context bounded by the client's default timeout."""
        return self._client.background_context()

    def online_channel(self, name: str, api_key: str) -> OnlineChannel:
        """
        Get an online channel.

        Raises:
            ConfigurationError: If name or api_key is empty

        """
        return OnlineChannel(self._client, name, api_key)

    def preview_channel(self, name: str, api_key: str, state: str = "live") -> PreviewChannel:
        """
        Get a preview channel.

        Raises:
            ConfigurationError: If name or api_key is empty, or state is not 'live' or 'staging'

        """
        return PreviewChannel(self._client, name, api_key, state)
