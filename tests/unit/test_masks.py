"""Unit tests for the mask engine."""

from decimal import Decimal

import pytest

from brform.shared.masks import (
    DocumentKind,
    DocumentValue,
    EditOperation,
    check_digits,
    format_currency,
    format_digits,
    has_check_digits,
    is_structurally_valid,
    max_digits,
    parse_currency,
    remask,
    remask_text,
    unmask,
)

DOCUMENT_KINDS = [
    DocumentKind.CPF,
    DocumentKind.CNPJ,
    DocumentKind.CPF_CNPJ,
    DocumentKind.CEP,
    DocumentKind.PHONE_FIXED,
    DocumentKind.PHONE_MOBILE,
    DocumentKind.DATE,
]


class TestUnmask:
    def test_keeps_only_ascii_digits(self):
        assert unmask("111.444.777-35") == "11144477735"
        assert unmask("(11) 98765-4321") == "11987654321"
        assert unmask("R$ 1.234,56") == "123456"
        assert unmask("abc") == ""
        assert unmask("") == ""
        assert unmask(None) == ""


class TestFormatDigits:
    @pytest.mark.parametrize(
        "kind, digits, expected",
        [
            (DocumentKind.CPF, "11144477735", "111.444.777-35"),
            (DocumentKind.CPF, "1234", "123.4"),
            (DocumentKind.CPF, "1234567", "123.456.7"),
            (DocumentKind.CNPJ, "11222333000181", "11.222.333/0001-81"),
            (DocumentKind.CNPJ, "112223", "11.222.3"),
            (DocumentKind.CEP, "01310100", "01310-100"),
            (DocumentKind.CEP, "0131", "0131"),
            (DocumentKind.PHONE_FIXED, "1133334444", "(11) 3333-4444"),
            (DocumentKind.PHONE_MOBILE, "11987654321", "(11) 98765-4321"),
            (DocumentKind.PHONE_MOBILE, "1", "(1"),
            (DocumentKind.PHONE_MOBILE, "1198", "(11) 98"),
            (DocumentKind.DATE, "29022024", "29/02/2024"),
            (DocumentKind.DATE, "290", "29/0"),
            (DocumentKind.GENERIC, "12a34", "1234"),
        ],
    )
    def test_layouts(self, kind, digits, expected):
        assert format_digits(kind, digits) == expected

    @pytest.mark.parametrize("kind", DOCUMENT_KINDS)
    def test_empty_documents_render_empty(self, kind):
        assert format_digits(kind, "") == ""

    def test_cpf_cnpj_switches_layout_after_eleven_digits(self):
        assert format_digits(DocumentKind.CPF_CNPJ, "11144477735") == "111.444.777-35"
        assert format_digits(DocumentKind.CPF_CNPJ, "112223330001") == "11.222.333/0001"
        assert format_digits(DocumentKind.CPF_CNPJ, "11222333000181") == "11.222.333/0001-81"


class TestCurrency:
    def test_digits_are_cents(self):
        assert remask_text(DocumentKind.CURRENCY, "12345") == "R$ 123,45"
        assert remask_text(DocumentKind.CURRENCY, "5") == "R$ 0,05"
        assert remask_text(DocumentKind.CURRENCY, "") == "R$ 0,00"

    def test_thousands_separator(self):
        assert remask_text(DocumentKind.CURRENCY, "123456789") == "R$ 1.234.567,89"

    def test_leading_zeros_collapse(self):
        assert remask_text(DocumentKind.CURRENCY, "000150") == "R$ 1,50"

    def test_custom_prefix(self):
        assert remask_text(DocumentKind.CURRENCY, "100", prefix="US$ ") == "US$ 1,00"

    def test_typing_and_backspace(self):
        text = remask_text(DocumentKind.CURRENCY, "")
        text = remask(DocumentKind.CURRENCY, text, EditOperation.insert(len(text), "5"))
        assert text == "R$ 0,05"
        text = remask(DocumentKind.CURRENCY, text, EditOperation.insert(len(text), "0"))
        assert text == "R$ 0,50"
        text = remask(DocumentKind.CURRENCY, text, EditOperation.delete(len(text) - 1))
        assert text == "R$ 0,05"

    def test_format_and_parse(self):
        assert format_currency(Decimal("1234.565")) == "R$ 1.234,57"
        assert parse_currency("R$ 1.234,56") == Decimal("1234.56")
        assert parse_currency("") == Decimal("0.00")
        assert parse_currency("R$ abc") == Decimal("0.00")


class TestRemask:
    def test_insert_in_the_middle_rebuilds_mask(self):
        assert remask(DocumentKind.CPF, "111.444", EditOperation.insert(0, "9")) == "911.144.4"

    def test_delete_last_digit(self):
        result = remask(DocumentKind.CPF, "111.444.777-35", EditOperation.delete(13))
        assert result == "111.444.777-3"

    def test_deleting_a_separator_puts_it_back(self):
        assert remask(DocumentKind.CPF, "123.4", EditOperation.delete(3)) == "123.4"

    def test_replace_selection(self):
        edit = EditOperation(position=0, deleted_length=7, inserted_text="999")
        assert remask(DocumentKind.CEP, "01310-1", edit) == "999"

    def test_replace_all(self):
        edit = EditOperation.replace_all("52998224725")
        assert remask(DocumentKind.CPF, "111.4", edit) == "529.982.247-25"

    def test_positions_are_clamped(self):
        assert remask(DocumentKind.CEP, "0131", EditOperation(99, 5, "0")) == "01310"
        assert remask(DocumentKind.CEP, "0131", EditOperation(-3, 1, "")) == "131"

    def test_non_digit_input_is_ignored(self):
        assert remask(DocumentKind.CPF, "123", EditOperation.insert(3, "abc")) == "123"

    @pytest.mark.parametrize("kind", DOCUMENT_KINDS)
    def test_length_cap(self, kind):
        result = remask(kind, "", EditOperation.insert(0, "9" * 40))
        assert len(unmask(result)) == max_digits(kind)

    @pytest.mark.parametrize("kind", DOCUMENT_KINDS)
    def test_unmask_recovers_truncated_digits(self, kind):
        digits = "31122024987654321"
        masked = remask(kind, "", EditOperation.insert(0, digits))
        assert unmask(masked) == digits[: max_digits(kind)]

    @pytest.mark.parametrize("kind", DOCUMENT_KINDS)
    def test_remask_is_idempotent(self, kind):
        once = remask_text(kind, "1234567890123")
        assert remask_text(kind, once) == once

    def test_currency_cap(self):
        result = remask_text(DocumentKind.CURRENCY, "9" * 30)
        assert len(unmask(result)) == max_digits(DocumentKind.CURRENCY)


class TestStructure:
    def test_exact_lengths(self):
        assert is_structurally_valid(DocumentKind.CPF, "11144477735")
        assert not is_structurally_valid(DocumentKind.CPF, "1114447773")
        assert is_structurally_valid(DocumentKind.CNPJ, "11222333000181")
        assert is_structurally_valid(DocumentKind.CEP, "01310100")
        assert is_structurally_valid(DocumentKind.PHONE_FIXED, "1133334444")
        assert not is_structurally_valid(DocumentKind.PHONE_FIXED, "11987654321")
        assert is_structurally_valid(DocumentKind.PHONE_MOBILE, "11987654321")

    def test_cpf_cnpj_accepts_both_lengths(self):
        assert is_structurally_valid(DocumentKind.CPF_CNPJ, "11144477735")
        assert is_structurally_valid(DocumentKind.CPF_CNPJ, "11222333000181")
        assert not is_structurally_valid(DocumentKind.CPF_CNPJ, "112223330001")

    def test_date_must_exist(self):
        assert is_structurally_valid(DocumentKind.DATE, "29022024")
        assert not is_structurally_valid(DocumentKind.DATE, "29022023")
        assert not is_structurally_valid(DocumentKind.DATE, "31042024")

    @pytest.mark.parametrize("kind", list(DocumentKind))
    def test_empty_is_never_complete(self, kind):
        assert not is_structurally_valid(kind, "")

    def test_non_digits_are_rejected(self):
        assert not is_structurally_valid(DocumentKind.CEP, "0131010a")


class TestCheckDigits:
    def test_cpf_and_cnpj(self):
        assert check_digits(DocumentKind.CPF, "11144477735")
        assert not check_digits(DocumentKind.CPF, "11111111111")
        assert check_digits(DocumentKind.CNPJ, "11222333000181")
        assert not check_digits(DocumentKind.CNPJ, "11222333000182")

    def test_combined_kind_picks_algorithm_by_length(self):
        assert check_digits(DocumentKind.CPF_CNPJ, "11144477735")
        assert check_digits(DocumentKind.CPF_CNPJ, "11222333000181")
        assert not check_digits(DocumentKind.CPF_CNPJ, "12345678900")

    def test_wrong_length_fails(self):
        assert not check_digits(DocumentKind.CPF, "111444777")
        assert not check_digits(DocumentKind.CNPJ, "11144477735")

    def test_kinds_without_check_digits_pass(self):
        assert not has_check_digits(DocumentKind.CEP)
        assert check_digits(DocumentKind.CEP, "01310100")
        assert has_check_digits(DocumentKind.CPF_CNPJ)


class TestDocumentValue:
    def test_from_text(self):
        value = DocumentValue.from_text(DocumentKind.CPF, "111.444.777-35")
        assert value.raw_digits == "11144477735"
        assert value.masked == "111.444.777-35"
        assert value.is_complete
        assert not value.is_empty

    def test_truncates_to_cap(self):
        value = DocumentValue.from_digits(DocumentKind.CEP, "0131010099")
        assert value.raw_digits == "01310100"
        assert value.masked == "01310-100"

    def test_is_hashable_value(self):
        first = DocumentValue.from_text(DocumentKind.CEP, "01310100")
        second = DocumentValue.from_text(DocumentKind.CEP, "01310-100")
        assert first == second
        assert len({first, second}) == 1
