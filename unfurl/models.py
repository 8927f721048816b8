from dataclasses import asdict, dataclass
from typing import NamedTuple


@dataclass(frozen=True)
class UnfurlResult:
    url: str
    title: str = ""
    description: str = ""
    image: str = ""
    site_name: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class ProviderMatch(NamedTuple):
    provider: str
    site_name: str
    oembed_url: str


class FetchedPage(NamedTuple):
    final_url: str
    status: int
    content_type: str
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()
