"""Tests for login flags."""

import pytest

from ljkit.core.flags import LoginFlags, validate_login_flags
from ljkit.errors import LoginConfigError


class TestLoginFlags:

    def test_bit_values(self):
        assert LoginFlags.GET_MOODS == 1
        assert LoginFlags.GET_MENU == 2
        assert LoginFlags.GET_USER_PICTURES == 4
        assert LoginFlags.DO_NOT_USE_FAST_SERVERS == 8

    def test_union(self):
        assert int(LoginFlags.GET_MOODS | LoginFlags.GET_MENU) == 3

    def test_default(self):
        assert LoginFlags.DEFAULT == 7
        assert not LoginFlags.DEFAULT & LoginFlags.DO_NOT_USE_FAST_SERVERS

    def test_reserved_mask(self):
        assert LoginFlags.RESERVED == 0xFFFFFFF0
        assert not LoginFlags.RESERVED & (LoginFlags.DEFAULT | LoginFlags.DO_NOT_USE_FAST_SERVERS)


class TestValidateLoginFlags:

    def test_accepts_defined_flags(self):
        flags = validate_login_flags(LoginFlags.DEFAULT | LoginFlags.DO_NOT_USE_FAST_SERVERS)
        assert flags == 15

    def test_accepts_plain_int(self):
        assert validate_login_flags(5) == LoginFlags.GET_MOODS | LoginFlags.GET_USER_PICTURES

    def test_accepts_none(self):
        assert validate_login_flags(0) == LoginFlags.NONE

    @pytest.mark.parametrize("value", [0x10, 0x80000000, 0xFFFFFFFF, 1 << 32, (1 << 40) | 1, -1])
    def test_rejects_reserved_bits(self, value):
        with pytest.raises(LoginConfigError):
            validate_login_flags(value)
