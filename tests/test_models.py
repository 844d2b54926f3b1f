"""Tests for Money, Product and ClientIdentity."""

import pytest

from axitrace.models import ClientIdentity, Money, Product


class TestMoney:
    def test_currency_uppercased(self):
        assert Money(10, "usd").currency == "USD"

    def test_serialize(self):
        assert Money(99.99, "EUR").serialize() == {"amount": 99.99, "currency": "EUR"}

    def test_amount_is_float(self):
        money = Money(10, "USD")
        assert isinstance(money.amount, float)
        assert money.amount == 10.0

    def test_no_rounding(self):
        assert Money(1234.5678, "jpy").serialize()["amount"] == 1234.5678

    def test_from_dict_defaults(self):
        money = Money.from_dict({})
        assert money.amount == 0.0
        assert money.currency == "USD"

    def test_from_dict(self):
        money = Money.from_dict({"amount": "12.5", "currency": "gbp"})
        assert money.amount == 12.5
        assert money.currency == "GBP"

    @pytest.mark.parametrize("amount", ["abc", "", [1]])
    def test_from_dict_unparsable_amount_is_zero(self, amount):
        money = Money.from_dict({"amount": amount, "currency": "eur"})
        assert money.amount == 0.0
        assert money.currency == "EUR"

    def test_str(self):
        assert str(Money(5, "usd")) == "5.00 USD"


class TestProduct:
    def test_serialize_minimal(self):
        assert Product("SKU-1").serialize() == {"item_id": "SKU-1"}

    def test_serialize_omits_unset_fields(self):
        data = Product("SKU-1", item_name="Shirt", price=19.99).serialize()
        assert data == {"item_id": "SKU-1", "item_name": "Shirt", "price": 19.99}

    def test_serialize_stock_fields_camel_case(self):
        data = Product("SKU-1", in_stock=False, stock_quantity=0).serialize()
        assert data["inStock"] is False
        assert data["stockQuantity"] == 0

    def test_currency_uppercased(self):
        assert Product("SKU-1", currency="eur").currency == "EUR"
        assert Product.from_dict({"id": "x", "currency": "eur"}).currency == "EUR"

    def test_custom_attributes_appended(self):
        product = Product("SKU-1").set_custom_attribute("color", "blue")
        assert product.serialize()["color"] == "blue"

    def test_custom_attribute_overrides_known_field(self):
        product = Product("SKU-1", price=10.0).set_custom_attribute("price", 99)
        assert product.serialize()["price"] == 99

    def test_from_dict_item_id_resolution(self):
        assert Product.from_dict({"item_id": "A", "sku": "B", "id": "C"}).item_id == "A"
        assert Product.from_dict({"sku": "B", "id": "C"}).item_id == "B"
        assert Product.from_dict({"id": "C"}).item_id == "C"
        assert Product.from_dict({"item_id": "", "id": "C"}).item_id == "C"
        assert Product.from_dict({}).item_id == ""

    def test_from_dict_sku_kept(self):
        product = Product.from_dict({"sku": "B"})
        assert product.sku == "B"

    def test_from_dict_aliases(self):
        product = Product.from_dict(
            {
                "id": "P1",
                "name": "Shirt",
                "category": "Apparel",
                "brand": "Acme",
                "variant": "Blue",
                "inStock": True,
                "stockQuantity": "7",
            }
        )
        assert product.item_name == "Shirt"
        assert product.item_category == "Apparel"
        assert product.item_brand == "Acme"
        assert product.item_variant == "Blue"
        assert product.in_stock is True
        assert product.stock_quantity == 7

    def test_from_dict_primary_key_wins(self):
        product = Product.from_dict(
            {"id": "P1", "item_category": "Primary", "category": "Fallback"}
        )
        assert product.item_category == "Primary"

    def test_from_dict_blank_numbers_are_zero(self):
        product = Product.from_dict(
            {"sku": "S1", "price": "", "quantity": "n/a", "index": None, "stockQuantity": " "}
        )
        assert product.price == 0.0
        assert product.quantity == 0
        assert product.index is None
        assert product.stock_quantity == 0

    def test_from_dict_numeric_strings(self):
        product = Product.from_dict({"sku": "S1", "price": "9.5", "quantity": "2.0"})
        assert product.price == 9.5
        assert product.quantity == 2

    def test_from_dict_missing_fields_stay_unset(self):
        product = Product.from_dict({"id": "P1"})
        assert product.price is None
        assert product.quantity is None
        assert product.in_stock is None

    def test_round_trip(self):
        original = Product(
            "SKU-9",
            item_name="Hat",
            price=12.0,
            quantity=3,
            item_category="Accessories",
            item_brand="Acme",
            in_stock=True,
        )
        restored = Product.from_dict(original.serialize())

        assert restored.item_id == original.item_id
        assert restored.item_name == original.item_name
        assert restored.price == original.price
        assert restored.quantity == original.quantity
        assert restored.item_category == original.item_category
        assert restored.item_brand == original.item_brand
        assert restored.in_stock is True


class TestClientIdentity:
    def test_empty_has_no_identifier(self):
        assert not ClientIdentity().has_identifier()
        assert ClientIdentity().serialize() == {}

    def test_any_field_is_identifier(self):
        assert ClientIdentity(custom_id="v1").has_identifier()
        assert ClientIdentity(numeric_id=0).has_identifier()
        assert ClientIdentity(uuid="u").has_identifier()
        assert ClientIdentity(email="a@b.com").has_identifier()

    def test_serialize_wire_keys(self):
        identity = ClientIdentity(custom_id="v1", numeric_id=42, uuid="u", email="a@b.com")
        assert identity.serialize() == {
            "customId": "v1",
            "id": 42,
            "uuid": "u",
            "email": "a@b.com",
        }

    @pytest.mark.parametrize("raw", ["", "abc"])
    def test_from_dict_bad_numeric_id_is_zero(self, raw):
        assert ClientIdentity.from_dict({"id": raw}).numeric_id == 0

    def test_from_dict_symmetric(self):
        data = {"customId": "v1", "id": "42", "email": "a@b.com"}
        identity = ClientIdentity.from_dict(data)
        assert identity.numeric_id == 42
        assert identity.serialize() == {"customId": "v1", "id": 42, "email": "a@b.com"}
