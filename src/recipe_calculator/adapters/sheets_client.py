"""Spreadsheet service client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class SheetsClient(Protocol):
    """Interface for the spreadsheet-backed ingredient service."""

    async def fetch_csv(self) -> str:
        """Return the published ingredient sheet as CSV text."""

    async def submit_ingredient(self, payload: dict[str, object]) -> dict[str, object]:
        """Post a new ingredient and return the decoded response body."""


@dataclass
class HttpxSheetsClient(SheetsClient):
    """HTTPX-backed spreadsheet client."""

    csv_url: str
    submit_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls, csv_url: str, submit_url: str, timeout: float = 10.0
    ) -> "HttpxSheetsClient":
        """Create a spreadsheet client with a managed httpx session."""
        return cls(
            csv_url=csv_url,
            submit_url=submit_url,
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout=timeout,
        )

    async def fetch_csv(self) -> str:
        """Download the published CSV."""
        response = await self.http_client.get(self.csv_url, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    async def submit_ingredient(self, payload: dict[str, object]) -> dict[str, object]:
        """Post an ingredient as JSON to the submission endpoint."""
        response = await self.http_client.post(
            self.submit_url, json=payload, timeout=self.timeout
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("Unexpected response from ingredient service")
        return body

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
