import pytest


@pytest.fixture
def og_page():
    return """<!doctype html>
<html><head>
  <title>Fallback title</title>
  <meta property="og:title" content="Hello">
  <meta content="/img.png" property="og:image">
</head><body><p>hi</p></body></html>"""
