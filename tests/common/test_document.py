from __future__ import annotations

import pytest

from src.finstrava.finstrava.common import document


@pytest.mark.parametrize("cpf", ["529.982.247-25", "52998224725"])
def test_valid_cpf(cpf):
    assert document.validate_cpf(cpf) is True


@pytest.mark.parametrize("cpf", ["529.982.247-26", "111.111.111-11", "5299822472", ""])
def test_invalid_cpf(cpf):
    assert document.validate_cpf(cpf) is False


@pytest.mark.parametrize("cnpj", ["11.222.333/0001-81", "11222333000181"])
def test_valid_cnpj(cnpj):
    assert document.validate_cnpj(cnpj) is True


@pytest.mark.parametrize("cnpj", ["11.222.333/0001-82", "00.000.000/0000-00", "1122233300018"])
def test_invalid_cnpj(cnpj):
    assert document.validate_cnpj(cnpj) is False


def test_detect_document_type_by_length():
    assert document.detect_document_type("529.982.247-25") == "cpf"
    assert document.detect_document_type("11.222.333/0001-81") == "cnpj"
    assert document.detect_document_type("12345") is None


def test_format_document():
    assert document.format_document("52998224725", "cpf") == "529.982.247-25"
    assert document.format_document("11222333000181", "cnpj") == "11.222.333/0001-81"
    assert document.format_document("12-34", "cpf") == "1234"
