"""Tests for fingerprinting and cross-page reconciliation."""

from testgen import (
    ExtractionLimits,
    FeatureKind,
    FormField,
    compute_fingerprint,
    extract_from_html,
    reconcile,
    reconcile_pages,
)


HOME = 'https://shop.test/'
PRODUCTS = 'https://shop.test/products'
CART = 'https://shop.test/cart'


class TestComputeFingerprint:
    """Tests for feature identity keys."""

    def test_button_normalised(self, make_feature):
        a = make_feature(FeatureKind.BUTTON, text='Add  to Cart')
        b = make_feature(FeatureKind.BUTTON, page=HOME, text='add to cart')
        assert compute_fingerprint(a) == compute_fingerprint(b) == 'button:add to cart'

    def test_link_includes_href(self, make_feature):
        a = make_feature(FeatureKind.LINK, text='Help', href='https://shop.test/help')
        b = make_feature(FeatureKind.LINK, text='Help', href='https://docs.shop.test/')
        assert compute_fingerprint(a) != compute_fingerprint(b)

    def test_form_field_order_ignored(self, make_feature):
        a = make_feature(FeatureKind.FORM, subtype='login',
                         fields=[FormField(name='email'), FormField(name='password')])
        b = make_feature(FeatureKind.FORM, subtype='login',
                         fields=[FormField(name='password'), FormField(name='email')])
        assert compute_fingerprint(a) == compute_fingerprint(b) == 'form:login:email,password'

    def test_navigation_uses_href_set(self, make_feature):
        a = make_feature(FeatureKind.NAVIGATION, links=[('Home', HOME), ('Cart', CART)])
        b = make_feature(FeatureKind.NAVIGATION, links=[('Basket', CART), ('Start', HOME)])
        assert compute_fingerprint(a) == compute_fingerprint(b)

    def test_table_caption_and_headers(self, make_feature):
        table = make_feature(FeatureKind.TABLE, caption='Orders', headers=['Total', 'ID'])
        assert compute_fingerprint(table) == 'table:orders:id,total'


class TestReconcile:
    """Tests for the reconciliation fold."""

    def test_merges_pages_in_first_seen_order(self, make_feature):
        features = [
            make_feature(FeatureKind.BUTTON, page=PRODUCTS, text='Sign out'),
            make_feature(FeatureKind.BUTTON, page=HOME, text='Sign out'),
            make_feature(FeatureKind.BUTTON, page=PRODUCTS, text='Sign out'),
        ]

        unique = reconcile(features)

        assert len(unique) == 1
        assert unique[0].appears_on_pages == [PRODUCTS, HOME]
        assert unique[0].is_global is True

    def test_single_page_feature_is_page_specific(self, make_feature):
        unique = reconcile([make_feature(FeatureKind.BUTTON, text='Add to Cart')])

        assert unique[0].is_global is False
        assert unique[0].appears_on_pages == [PRODUCTS]
        assert unique[0].fingerprint == 'button:add to cart'

    def test_region_signal_makes_global(self, make_feature):
        unique = reconcile([make_feature(FeatureKind.LINK, text='Privacy', href=HOME + 'privacy', region=True)])
        assert unique[0].is_global is True

    def test_region_signal_is_ored(self, make_feature):
        features = [
            make_feature(FeatureKind.LINK, text='Privacy', href=HOME + 'privacy'),
            make_feature(FeatureKind.LINK, text='Privacy', href=HOME + 'privacy', region=True),
        ]
        assert reconcile(features)[0].in_global_region is True

    def test_header_link_on_one_page_is_global_on_both(self):
        in_header = '<html><body><header><a href="/help">Help</a></header><main><p>Home</p></main></body></html>'
        in_main = '<html><body><main><a href="/help">Help</a></main></body></html>'
        pages = [
            extract_from_html(in_header, HOME, ExtractionLimits()),
            extract_from_html(in_main, CART, ExtractionLimits()),
        ]

        links = [f for f in reconcile_pages(pages) if f.kind == FeatureKind.LINK]

        assert len(links) == 1
        assert links[0].attributes['href'] == 'https://shop.test/help'
        assert links[0].is_global is True
        assert links[0].appears_on_pages == [HOME, CART]

    def test_inputs_not_mutated(self, make_feature):
        first = make_feature(FeatureKind.BUTTON, page=HOME, text='Help')
        second = make_feature(FeatureKind.BUTTON, page=CART, text='Help')

        reconcile([first, second])

        assert first.appears_on_pages == []
        assert first.is_global is False
        assert first.fingerprint == ''

    def test_idempotent(self, make_feature):
        features = [
            make_feature(FeatureKind.BUTTON, page=HOME, text='Help'),
            make_feature(FeatureKind.BUTTON, page=CART, text='Help'),
            make_feature(FeatureKind.BUTTON, page=CART, text='Checkout'),
        ]

        once = reconcile(features)
        twice = reconcile(once)

        assert [(f.fingerprint, f.appears_on_pages, f.is_global) for f in once] == \
               [(f.fingerprint, f.appears_on_pages, f.is_global) for f in twice]

    def test_adding_a_page_never_shrinks_pages(self, make_feature):
        page_one = [make_feature(FeatureKind.BUTTON, page=HOME, text='Help')]
        page_two = [make_feature(FeatureKind.BUTTON, page=CART, text='Help')]

        before = reconcile_pages([page_one])
        after = reconcile_pages([page_one, page_two])

        assert set(before[0].appears_on_pages) <= set(after[0].appears_on_pages)
        assert after[0].is_global is True

    def test_empty(self):
        assert reconcile([]) == []
        assert reconcile_pages([]) == []
