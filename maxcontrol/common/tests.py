"""
Tests para validadores de documentos brasileños y valores monetarios
"""

import pytest
from decimal import Decimal

from maxcontrol.common.validators import (
    only_digits, validate_cpf, validate_cnpj, format_cpf, format_cnpj, validate_money
)


class TestCpf:

    @pytest.mark.parametrize("cpf", ["52998224725", "529.982.247-25"])
    def test_valid(self, cpf):
        assert validate_cpf(cpf)

    @pytest.mark.parametrize("cpf", ["52998224724", "111.111.111-11", "1234", ""])
    def test_invalid(self, cpf):
        assert not validate_cpf(cpf)

    def test_format(self):
        assert format_cpf("52998224725") == "529.982.247-25"
        assert format_cpf("123") == "123"


class TestCnpj:

    @pytest.mark.parametrize("cnpj", ["11222333000181", "11.222.333/0001-81"])
    def test_valid(self, cnpj):
        assert validate_cnpj(cnpj)

    @pytest.mark.parametrize("cnpj", ["11222333000180", "00000000000000", "123"])
    def test_invalid(self, cnpj):
        assert not validate_cnpj(cnpj)

    def test_format(self):
        assert format_cnpj("11222333000181") == "11.222.333/0001-81"


def test_only_digits():
    assert only_digits("11.222.333/0001-81") == "11222333000181"
    assert only_digits(None) == ""


class TestMoney:

    @pytest.mark.parametrize("value,expected", [
        ("10.005", "10.01"),
        ("10.004", "10.00"),
        ("2.675", "2.68"),
        ("100", "100.00"),
    ])
    def test_rounds_half_up(self, value, expected):
        assert validate_money(Decimal(value)) == Decimal(expected)

    @pytest.mark.parametrize("value", ["1e30", "123456789012345678901234567890", "10000000000000"])
    def test_out_of_range(self, value):
        with pytest.raises(ValueError):
            validate_money(Decimal(value))

    def test_none_passes_through(self):
        assert validate_money(None) is None
