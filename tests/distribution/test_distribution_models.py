"""
Tests for distribution list models.

Tests:
- Role parsing
- Entry invariants
- List helpers
"""

from dataclasses import FrozenInstanceError

import pytest

from distribution import DistributionEntry, DistributionList, Role


class TestRoleParsing:
    """Tests for case-insensitive role matching."""

    @pytest.mark.parametrize("token", ["to", "To", "TO", " tO "])
    def test_to_variants(self, token):
        """Test that every casing of TO parses to the same role."""
        assert Role.parse(token) is Role.TO

    def test_cc_and_bcc(self):
        """Test the other recognized roles."""
        assert Role.parse("cc") is Role.CC
        assert Role.parse("Bcc") is Role.BCC

    @pytest.mark.parametrize("token", ["XX", "", "reply-to", None])
    def test_unrecognized(self, token):
        """Test that unknown tokens parse to None instead of raising."""
        assert Role.parse(token) is None


class TestDistributionEntry:
    """Tests for a single distribution entry."""

    def test_role_normalized(self):
        """Test that the stored role is stripped and upper-cased."""
        entry = DistributionEntry(role=" bcc ", address="a@x.com")

        assert entry.role == "BCC"
        assert entry.recipient_role is Role.BCC
        assert entry.is_recognized

    def test_unknown_role_preserved(self):
        """Test that an unknown role token is kept as-is."""
        entry = DistributionEntry(role="xx", address="a@x.com")

        assert entry.role == "XX"
        assert entry.recipient_role is None
        assert not entry.is_recognized

    def test_empty_address_rejected(self):
        """Test that an empty address violates the entry invariant."""
        with pytest.raises(ValueError):
            DistributionEntry(role="TO", address="   ")

    def test_missing_address_rejected(self):
        """Test that a None address raises ValueError, not AttributeError."""
        with pytest.raises(ValueError):
            DistributionList.from_pairs([("TO", "a@x.com"), ("CC", None)])

    def test_non_text_values_coerced(self):
        """Test that values from spreadsheet readers are converted to text."""
        entry = DistributionEntry(role=None, address=12345)

        assert entry.role == ""
        assert entry.address == "12345"
        assert not entry.is_recognized

    def test_role_enum_accepted(self):
        """Test that a Role member can be used as the role token."""
        entry = DistributionEntry(role=Role.CC, address="a@x.com")

        assert entry.recipient_role is Role.CC

    def test_address_length_limit(self):
        """Test the 254 character address limit."""
        local = "a" * (254 - len("@x.com"))
        assert DistributionEntry(role="TO", address=f"{local}@x.com").address.endswith("@x.com")

        with pytest.raises(ValueError):
            DistributionEntry(role="TO", address=f"a{local}@x.com")

    def test_entry_is_immutable(self):
        """Test that entries cannot be changed after creation."""
        entry = DistributionEntry(role="TO", address="a@x.com")

        with pytest.raises(FrozenInstanceError):
            entry.address = "b@x.com"


class TestDistributionList:
    """Tests for the distribution list container."""

    def test_from_pairs(self):
        """Test building a list from (role, address) pairs."""
        dist = DistributionList.from_pairs([("TO", "a@x.com"), ("CC", "b@x.com")])

        assert len(dist) == 2
        assert dist[1].address == "b@x.com"

    def test_addresses_for_keeps_order(self):
        """Test that per-role addresses follow source order."""
        dist = DistributionList.from_pairs([
            ("TO", "a@x.com"),
            ("CC", "b@x.com"),
            ("to", "c@x.com"),
        ])

        assert dist.addresses_for(Role.TO) == ["a@x.com", "c@x.com"]

    def test_entries_stored_as_tuple(self):
        """Test that a list passed in is copied into a tuple."""
        entries = [DistributionEntry(role="TO", address="a@x.com")]
        dist = DistributionList(entries=entries)
        entries.append(DistributionEntry(role="CC", address="b@x.com"))

        assert isinstance(dist.entries, tuple)
        assert len(dist) == 1

    def test_empty_list_is_falsy(self):
        """Test truthiness of an empty list."""
        assert not DistributionList()
        assert list(DistributionList()) == []
