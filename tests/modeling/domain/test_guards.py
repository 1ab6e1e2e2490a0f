"""Tests for the guard library."""

import pytest
from modeling.cipher import set_cipher
from modeling.cipher.fake_adapter import FakeCipher
from modeling.exceptions import (
    ImmutablePropertyError,
    MissingPropertyError,
    UnknownPropertyError,
    ValidationError,
)
from modeling.guards import (
    RegEx,
    UpdaterSpec,
    ValidationSpec,
    allow,
    check_format,
    derive,
    encrypt,
    freeze,
    hash_properties,
    is_valid,
    require,
    validate,
)
from modeling.registry import Phase
from modeling.snapshot import Snapshot


def _changes(current: Snapshot, **changes) -> Snapshot:
    """Proposed changes as the pre phase sees them."""
    return Snapshot(changes, model_name=current.model_name, previous=current)


class TestRegEx:
    @pytest.mark.parametrize("number", ["378282246310005", "4111111111111111", "5555555555554444"])
    def test_valid_card_numbers(self, number):
        assert RegEx.test("credit_card", number)

    @pytest.mark.parametrize("number", ["37828224631000", "1234", "4111-1111-1111-1111"])
    def test_invalid_card_numbers(self, number):
        assert not RegEx.test("credit_card", number)

    def test_email_and_phone(self):
        assert RegEx.test("email", "ada@example.com")
        assert not RegEx.test("email", "ada@example")
        assert RegEx.test("phone", "555-123-4567")
        assert not RegEx.test("phone", "055-123-4567")

    def test_ip_addresses(self):
        assert RegEx.test("ipv4_address", "10.0.0.255")
        assert not RegEx.test("ipv4_address", "10.0.0.256")
        assert RegEx.test("ipv6_address", "fe80::1")

    def test_unnamed_pattern_is_used_as_is(self):
        assert RegEx.test(r"^W-\d+$", "W-42")


class TestRequire:
    def test_present_properties_pass(self):
        obj = Snapshot({"name": "widget", "price": 10})
        assert require("name", "price")(obj) is obj

    def test_missing_properties_are_listed(self):
        with pytest.raises(MissingPropertyError) as exc:
            require("name", "price", "sku")(Snapshot({"price": 10}))
        assert str(exc.value) == "missing required properties: name, sku"
        assert exc.value.messages == {"name": ["is required"], "sku": ["is required"]}

    def test_empty_values_count_as_missing(self):
        with pytest.raises(MissingPropertyError):
            require("name")(Snapshot({"name": ""}))

    def test_update_may_rely_on_predecessor_values(self):
        current = Snapshot({"name": "widget", "price": 10})
        require("name")(_changes(current, price=12))

    def test_update_cannot_clear_required_property(self):
        current = Snapshot({"name": "widget"})
        with pytest.raises(MissingPropertyError):
            require("name")(_changes(current, name=None))

    def test_computed_requirement(self):
        guard = require(lambda obj: "proof" if obj.get("status") == "DONE" else None)
        guard(Snapshot({"status": "OPEN"}))
        with pytest.raises(MissingPropertyError):
            guard(Snapshot({"status": "DONE"}))

    def test_runs_in_pre_phase(self):
        assert require("name").phase is Phase.PRE
        assert require("name").name == "require_properties"


class TestFreeze:
    def test_creation_is_not_affected(self):
        freeze("sku")(Snapshot({"sku": "W-1"}))

    def test_update_touching_frozen_property_fails(self):
        current = Snapshot({"sku": "W-1", "price": 10})
        with pytest.raises(ImmutablePropertyError) as exc:
            freeze("sku")(_changes(current, sku="W-2", price=12))
        assert exc.value.props == ["sku"]
        assert str(exc.value) == "cannot update readonly properties: sku"

    def test_other_properties_may_change(self):
        current = Snapshot({"sku": "W-1", "price": 10})
        freeze("sku")(_changes(current, price=12))

    def test_conditional_freeze_uses_predecessor(self):
        guard = freeze(lambda obj: "price" if obj.previous.get("status") == "LOCKED" else None)

        guard(_changes(Snapshot({"status": "OPEN"}), price=12))
        with pytest.raises(ImmutablePropertyError):
            guard(_changes(Snapshot({"status": "LOCKED"}), price=12))


class TestAllow:
    def test_unknown_property_fails(self):
        current = Snapshot({"name": "widget"})
        with pytest.raises(UnknownPropertyError) as exc:
            allow("name", "price")(_changes(current, name="gadget", colour="red"))
        assert str(exc.value) == "invalid properties: colour"

    def test_reserved_properties_are_allowed(self):
        current = Snapshot({"name": "widget"})
        allow("name", reserved=("widget_id",))(_changes(current, widget_id="w-1"))

    def test_creation_is_not_affected(self):
        allow("name")(Snapshot({"name": "widget", "anything": 1}))


class TestValidate:
    def test_runs_in_post_phase(self):
        assert validate(ValidationSpec("name")).phase is Phase.POST

    def test_every_enabled_check_must_pass(self):
        spec = ValidationSpec("size", typeof=int, maxnum=10, values=[5, 10, 15])
        assert is_valid(spec, {}, 10)
        assert not is_valid(spec, {}, 15)
        assert not is_valid(spec, {}, 10.0)

    def test_ceilings_are_inclusive(self):
        assert is_valid(ValidationSpec("size", maxnum=10), {}, 10)
        assert not is_valid(ValidationSpec("size", maxnum=10), {}, 10.01)
        assert is_valid(ValidationSpec("name", maxlen=3), {}, "abc")
        assert not is_valid(ValidationSpec("name", maxlen=3), {}, "abcd")

    def test_custom_predicate_gets_object_and_value(self):
        spec = ValidationSpec("max", is_valid=lambda obj, value: value > obj["min"])
        assert is_valid(spec, {"min": 1}, 2)
        assert not is_valid(spec, {"min": 3}, 2)

    def test_invalid_properties_are_named(self):
        guard = validate(
            ValidationSpec("email", regex="email"),
            ValidationSpec("size", maxnum=10),
            ValidationSpec("name", maxlen=10),
        )
        with pytest.raises(ValidationError) as exc:
            guard(Snapshot({"email": "nope", "size": 11, "name": "widget"}))
        assert exc.value.props == ["email", "size"]
        assert str(exc.value) == "invalid value for email, size"

    def test_absent_properties_are_skipped(self):
        guard = validate(ValidationSpec("size", maxnum=10))
        guard(Snapshot({"name": "widget"}))


class TestDerive:
    def test_trigger_recomputes_fields(self):
        guard = derive(UpdaterSpec("items", lambda obj, items: {"count": len(items)}))
        result = guard(Snapshot({"items": [1, 2, 3]}))
        assert result["count"] == 3

    def test_no_trigger_no_change(self):
        guard = derive(UpdaterSpec("items", lambda obj, items: {"count": len(items)}))
        obj = Snapshot({"name": "widget"})
        assert guard(obj) is obj

    def test_derived_changes_keep_predecessor(self):
        current = Snapshot({"items": [1]})
        guard = derive(UpdaterSpec("items", lambda obj, items: {"count": len(items)}))
        result = guard(_changes(current, items=[1, 2]))
        assert result.previous is current
        assert dict(result) == {"items": [1, 2], "count": 2}

    def test_later_updaters_win(self):
        guard = derive(
            UpdaterSpec("a", lambda obj, value: {"total": 1}),
            UpdaterSpec("b", lambda obj, value: {"total": 2}),
        )
        assert guard(Snapshot({"a": 1, "b": 1}))["total"] == 2


class TestEncryptAndHash:
    def test_encrypts_present_properties(self):
        cipher = FakeCipher()
        set_cipher(cipher)

        result = encrypt("ssn", "ccv")(Snapshot({"ssn": "123-45-6789", "name": "Ada"}))

        assert result["ssn"] != "123-45-6789"
        assert cipher.decrypt(result["ssn"]) == "123-45-6789"
        assert "ccv" not in result
        assert result["name"] == "Ada"

    def test_custom_transform(self):
        result = encrypt("name", transform=str.upper)(Snapshot({"name": "ada"}))
        assert result["name"] == "ADA"

    def test_hashes_passwords(self):
        cipher = FakeCipher()
        set_cipher(cipher)

        guard = hash_properties("password")
        result = guard(Snapshot({"password": "s3cret"}))

        assert guard.name == "hash_passwords"
        assert result["password"] == cipher.hash("s3cret")

    def test_format_is_checked_before_encryption(self):
        guard = encrypt(check_format("email", "email"))
        assert guard(Snapshot({"email": "ada@example.com"}))["email"].startswith("enc:")
        with pytest.raises(ValidationError) as exc:
            guard(Snapshot({"email": "not-an-email"}))
        assert exc.value.props == ["email"]
