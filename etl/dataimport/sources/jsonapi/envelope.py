from pydantic import BaseModel, ConfigDict, JsonValue

from ..base_connector import Record

NEXT_LINK = "next"


class PageEnvelope(BaseModel):
    """One decoded response body: the page's records plus its pagination links."""

    model_config = ConfigDict(extra="ignore")

    data: list[Record]
    links: dict[str, JsonValue]

    @property
    def next_url(self) -> str | None:
        link = self.links.get(NEXT_LINK)
        # JSON:API allows a link object in place of a bare URL string
        if isinstance(link, dict):
            link = link.get("href")
        if isinstance(link, str):
            return link
        return None
