"""
Tests for domain model helpers (addresses, orders, products, registration)
"""
import json

import pytest
from pydantic import ValidationError

from jingo.domain.address import AddressFields, AddressUpdate, AdminAddressUpdate, FallbackAddress, parse_address_json
from jingo.domain.order import CheckoutRequest, Order
from jingo.domain.product import Product
from jingo.domain.user import RegisterRequest
from jingo.models.customer import Address as AddressRow


class TestParseAddressJson:

    def test_valid_snapshot(self, shipping_address):
        address = parse_address_json(json.dumps(shipping_address))

        assert isinstance(address, AddressFields)
        assert address.city == 'Miami'
        assert address.country == 'US'

    @pytest.mark.parametrize('text', [None, '', 'not json', '[]', '{"city": "Miami"}'])
    def test_unreadable_snapshot_falls_back(self, text):
        address = parse_address_json(text)

        assert isinstance(address, FallbackAddress)
        assert address.first_name == ''
        assert address.country == 'US'


class TestOrderToDict:

    def test_parses_addresses_and_converts_money(self, order_row):
        data = Order(**order_row).to_dict()

        assert data['shipping_address']['city'] == 'Miami'
        assert data['billing_address']['address1'] == ''
        assert data['total_amount'] == 3798.0
        assert data['is_paid'] is True
        assert data['total_quantity'] == 0


class TestProduct:

    def test_low_stock_only_when_tracked(self, product_row):
        assert Product(**product_row).is_low_stock is True
        assert Product(**dict(product_row, track_inventory=False)).is_low_stock is False

    def test_to_dict_converts_prices(self, product_row):
        data = Product(**product_row).to_dict()

        assert data['price'] == 1899.0
        assert data['sale_price'] is None
        assert data['is_low_stock'] is True


class TestCheckoutRequest:

    def test_billing_defaults_to_shipping(self, shipping_address):
        request = CheckoutRequest(
            email='ana@example.com',
            shipping_address=shipping_address,
            billing_address=dict(shipping_address, city='Orlando'),
            items=[{'product_id': 1, 'name': 'A', 'price': '10.00', 'quantity': 1}],
        )

        assert request.resolved_billing_address().city == 'Miami'

    def test_separate_billing_address(self, shipping_address):
        request = CheckoutRequest(
            email='ana@example.com',
            shipping_address=shipping_address,
            billing_address=dict(shipping_address, city='Orlando'),
            same_as_shipping=False,
            items=[{'product_id': 1, 'name': 'A', 'price': '10.00', 'quantity': 1}],
        )

        assert request.resolved_billing_address().city == 'Orlando'

    def test_empty_cart_is_rejected(self, shipping_address):
        with pytest.raises(ValidationError):
            CheckoutRequest(email='ana@example.com', shipping_address=shipping_address, items=[])


class TestRegisterRequest:

    @pytest.mark.parametrize('password', ['Short1', 'alllowercase1', 'ALLUPPERCASE1', 'NoDigitsHere'])
    def test_weak_passwords_are_rejected(self, password):
        with pytest.raises(ValidationError):
            RegisterRequest(email='ana@example.com', password=password, name='Ana Lopez')

    def test_customer_names_split_full_name(self):
        request = RegisterRequest(email='ana@example.com', password='Secret123', name='Ana Maria Lopez')

        assert request.customer_names() == ('Ana', 'Maria Lopez')

    def test_customer_names_single_word_repeats(self):
        request = RegisterRequest(email='ana@example.com', password='Secret123', name='Ana')

        assert request.customer_names() == ('Ana', 'Ana')

    def test_explicit_names_win(self):
        request = RegisterRequest(
            email='ana@example.com', password='Secret123', name='Ana Lopez',
            first_name='Anita', last_name='Lopez Garcia',
        )

        assert request.customer_names() == ('Anita', 'Lopez Garcia')


class TestAddressCountry:

    def test_full_country_name_fits_column(self, shipping_address):
        request = CheckoutRequest(
            email='ana@example.com',
            shipping_address=dict(shipping_address, country='United States'),
            items=[{'product_id': 1, 'name': 'A', 'price': '10.00', 'quantity': 1}],
        )

        assert len(request.shipping_address.country) <= AddressRow.__table__.c.country.type.length


class TestAddressUpdate:

    def test_omitted_fields_stay_unset(self):
        update = AddressUpdate(city='Tampa')

        assert update.model_dump(exclude_unset=True) == {'city': 'Tampa'}

    @pytest.mark.parametrize('field', ['first_name', 'city', 'type', 'country', 'is_default'])
    def test_explicit_null_rejected(self, field):
        with pytest.raises(ValidationError):
            AddressUpdate.model_validate({field: None})

    def test_nullable_fields_accept_null(self):
        update = AdminAddressUpdate.model_validate({'company': None, 'address2': None, 'phone': None})

        assert update.model_dump(exclude_unset=True) == {'company': None, 'address2': None, 'phone': None}
