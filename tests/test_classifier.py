"""Tests for form and button classification rules."""

import pytest

from testgen import (
    FORM_RULES,
    Feature,
    FeatureKind,
    FormField,
    classify_button,
    classify_feature,
    classify_form,
    classify_form_text,
)


class TestClassifyForm:
    """Tests for form subtype rules."""

    def test_login_form(self):
        fields = [
            FormField(name='email', input_type='email'),
            FormField(name='password', input_type='password'),
        ]
        assert classify_form(fields) == ('login', 'Login Form')

    def test_username_counts_as_login_identifier(self):
        assert classify_form_text('username password') == 'login'

    def test_confirm_field_makes_registration(self):
        """Email plus password confirmation is a sign-up, not a login."""
        assert classify_form_text('email password confirm_password') == 'registration'

    def test_search_by_keyword(self):
        assert classify_form([FormField(name='term', placeholder='Search products')])[0] == 'search'

    @pytest.mark.parametrize('name', ['q', 's', 'k'])
    def test_search_by_short_field_name(self, name):
        assert classify_form([FormField(name=name, input_type='text')])[0] == 'search'

    def test_search_by_input_type(self):
        assert classify_form([FormField(name='term', input_type='search')])[0] == 'search'

    def test_payment(self):
        assert classify_form_text('card_number expiry cvv') == 'payment'

    def test_registration_keyword(self):
        assert classify_form_text('signup_name') == 'registration'

    def test_feedback(self):
        fields = [FormField(name='name'), FormField(name='body', label='Your message')]
        assert classify_form(fields) == ('feedback', 'Feedback Form')

    def test_default_is_data_entry(self):
        assert classify_form([FormField(name='title'), FormField(name='price')]) == ('data-entry', 'Data Entry Form')

    def test_login_wins_over_search(self):
        """Rules are evaluated in order; login is listed first."""
        assert classify_form_text('email password query') == 'login'

    def test_rule_order(self):
        assert [subtype for _, subtype in FORM_RULES] == [
            'login', 'search', 'payment', 'registration', 'feedback',
        ]


class TestClassifyButton:
    """Tests for button subtype rules."""

    @pytest.mark.parametrize('text,expected', [
        ('Add to Cart', 'create'),
        ('Create project', 'create'),
        ('New', 'create'),
        ('Edit profile', 'update'),
        ('Update', 'update'),
        ('Delete', 'delete'),
        ('Remove item', 'delete'),
        ('Export CSV', 'export'),
        ('Download', 'export'),
        ('Sort by date', 'filter'),
        ('Submit', 'action'),
    ])
    def test_keywords(self, text, expected):
        assert classify_button(text) == expected

    def test_first_match_wins(self):
        assert classify_button('Add to filter') == 'create'

    def test_whole_word_matching(self):
        """Substrings inside other words do not match."""
        assert classify_button('Addresses') == 'action'
        assert classify_button('Newsletter') == 'action'

    def test_empty_text(self):
        assert classify_button('') == 'action'
        assert classify_button(None) == 'action'


class TestClassifyFeature:
    """Tests for feature-level classification."""

    def test_form_gets_subtype_and_purpose(self, make_feature):
        feature = make_feature(FeatureKind.FORM, fields=[FormField(name='q')])

        classified = classify_feature(feature)

        assert classified.subtype == 'search'
        assert classified.attributes['purpose'] == 'Search Form'
        assert feature.subtype is None
        assert 'purpose' not in feature.attributes

    def test_button_gets_subtype(self, make_feature):
        classified = classify_feature(make_feature(FeatureKind.BUTTON, text='Add to Cart'))
        assert classified.subtype == 'create'

    def test_virtual_form_keeps_login(self, make_feature):
        feature = make_feature(
            FeatureKind.FORM,
            subtype='login',
            fields=[FormField(name='q')],
            virtual=True,
            purpose='Login Form',
        )
        assert classify_feature(feature).subtype == 'login'

    @pytest.mark.parametrize('kind', [FeatureKind.LINK, FeatureKind.TABLE, FeatureKind.NAVIGATION, FeatureKind.MODAL])
    def test_other_kinds_unchanged(self, kind):
        feature = Feature(kind=kind, origin_page='https://shop.test/')
        assert classify_feature(feature) is feature
