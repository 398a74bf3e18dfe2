"""Tests for column constraints."""

import pytest

from simple_sql.constraints import IPV4_COLUMN, check_value, validate_ipv4
from simple_sql.errors import InvalidConstraintError


class TestValidateIPv4:
    """Tests for the dotted-quad check."""

    @pytest.mark.parametrize("token", [
        "192.168.1.1",
        "10.0.0.1",
        "0.0.0.0",
        "1.22.333.4",
        "999.999.999.999",  # octets are not range-checked
    ])
    def test_accepts(self, token):
        assert validate_ipv4(token) is True

    @pytest.mark.parametrize("token", [
        "192.168.1",        # too few segments
        "1.2.3.4.5",        # too many segments
        "abc.1.1.1",        # non-digit
        "1.2.3.",           # empty trailing segment
        ".1.2.3",           # empty leading segment
        "1..2.3",           # empty middle segment
        "1234.1.1.1",       # segment too long
        "1.1.1.1234",
        "1.1.1.1 ",
        "-1.1.1.1",
        "",
        "not-an-ip",
    ])
    def test_rejects(self, token):
        assert validate_ipv4(token) is False

    def test_rejects_non_ascii_digits(self):
        """Digits from other scripts are not accepted."""
        assert validate_ipv4("١.1.1.1") is False


class TestCheckValue:
    """Tests for constraint dispatch by column name."""

    def test_ipv4_column_valid(self):
        check_value(IPV4_COLUMN, "10.0.0.1")

    def test_ipv4_column_invalid(self):
        with pytest.raises(InvalidConstraintError) as exc_info:
            check_value("IPv4", "not-an-ip")
        assert exc_info.value.value == "not-an-ip"
        assert "Invalid IPv4 address 'not-an-ip'" in str(exc_info.value)

    def test_column_name_is_case_sensitive(self):
        """Only the exact name IPv4 carries the constraint."""
        check_value("ipv4", "not-an-ip")
        check_value("IPV4", "not-an-ip")

    def test_other_columns_unconstrained(self):
        check_value("name", "anything at all")
