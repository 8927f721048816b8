from requests.structures import CaseInsensitiveDict


class FakeResponse:
    """Just enough of requests.Response for the fetch and oEmbed paths."""

    def __init__(self, url="", status_code=200, content_type="text/html; charset=utf-8",
                 body=b"", json_data=None, chunks=None):
        self.url = url
        self.status_code = status_code
        self.headers = CaseInsensitiveDict({"Content-Type": content_type} if content_type else {})
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        self._json = json_data
        self._chunks = chunks
        self.closed = False

    @property
    def ok(self):
        return self.status_code < 400

    def iter_content(self, chunk_size=1):
        if self._chunks is not None:
            yield from self._chunks
            return
        for i in range(0, len(self._body), chunk_size):
            yield self._body[i:i + chunk_size]

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def close(self):
        self.closed = True
