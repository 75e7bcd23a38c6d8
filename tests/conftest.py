"""Shared test fixtures and configuration."""

from unittest.mock import MagicMock

import pytest

from testgen import AnalyzerConfig, Feature, FeatureKind, FormField


SHOP_HTML = '''
<html>
<body>
  <header class="site-header">
    <nav aria-label="Main">
      <a href="/">Home</a>
      <a href="/products">Products</a>
      <a href="#top">Top</a>
    </nav>
  </header>
  <main>
    <form id="search" action="/search">
      <input name="q" type="text" placeholder="Search products">
      <button type="submit">Go</button>
    </form>
    <button class="btn">Add to Cart</button>
    <input type="submit" value="Save">
    <a href="/about">About us</a>
    <a href="mailto:sales@shop.test">Email sales</a>
    <table>
      <caption>Orders</caption>
      <thead><tr><th>ID</th><th>Total</th></tr></thead>
      <tbody>
        <tr><td>1</td><td>10.00</td></tr>
        <tr><td>2</td><td>25.50</td></tr>
      </tbody>
    </table>
    <div role="dialog" aria-label="Confirm order"><p>Are you sure?</p></div>
  </main>
  <div class="main-footer"><a href="/privacy">Privacy</a></div>
</body>
</html>
'''


@pytest.fixture
def shop_html():
    """Rendered HTML for a small shop page."""
    return SHOP_HTML


@pytest.fixture
def analyzer_config():
    """Analyzer config with a token and no settle delays."""
    return AnalyzerConfig(
        browserless_token='test-token',
        page_settle_ms=0,
        login_settle_ms=0,
        request_timeout_s=60,
    )


@pytest.fixture
def mock_page():
    """A MagicMock standing in for a Playwright page."""
    page = MagicMock()
    page.url = 'https://app.test/dashboard'
    page.evaluate.return_value = ''
    return page


@pytest.fixture
def make_feature():
    """Factory for features with sensible defaults."""
    def _make(kind, page='https://shop.test/products', subtype=None, region=False, **attributes):
        return Feature(
            kind=kind,
            origin_page=page,
            subtype=subtype,
            attributes=attributes,
            in_global_region=region,
        )
    return _make


@pytest.fixture
def search_form(make_feature):
    """Classified search form with a single ``q`` field."""
    return make_feature(
        FeatureKind.FORM,
        subtype='search',
        fields=[FormField(name='q', input_type='text', placeholder='Search products')],
        purpose='Search Form',
    )


@pytest.fixture
def entry_form(make_feature):
    """Classified data-entry form."""
    return make_feature(
        FeatureKind.FORM,
        subtype='data-entry',
        fields=[
            FormField(name='title', input_type='text'),
            FormField(name='description', input_type='textarea'),
            FormField(name='csrf', input_type='hidden'),
        ],
        purpose='Data Entry Form',
    )
