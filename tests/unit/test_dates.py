"""Unit tests for date parsing."""

from datetime import date

from brform.shared.dates import format_date, parse_date, parse_date_flexible


class TestParseDate:
    """Strict ``dd/mm/yyyy`` parsing."""

    def test_valid_dates(self):
        assert parse_date("29/02/2024") == date(2024, 2, 29)
        assert parse_date(" 01/12/1999 ") == date(1999, 12, 1)

    def test_impossible_dates_are_rejected(self):
        """No rollover into the next month."""
        assert parse_date("31/02/2024") is None
        assert parse_date("29/02/2023") is None
        assert parse_date("00/01/2024") is None
        assert parse_date("10/13/2024") is None

    def test_partial_or_empty(self):
        assert parse_date("") is None
        assert parse_date(None) is None
        assert parse_date("12/03") is None
        assert parse_date("12/03/20x4") is None

    def test_custom_pattern(self):
        assert parse_date("2024-02-29", "%Y-%m-%d") == date(2024, 2, 29)


class TestParseDateFlexible:
    def test_accepts_strict_form(self):
        assert parse_date_flexible("01/02/2024") == date(2024, 2, 1)

    def test_alternative_separators(self):
        assert parse_date_flexible("1-2-2024") == date(2024, 2, 1)
        assert parse_date_flexible("01.02.2024") == date(2024, 2, 1)

    def test_two_digit_years(self):
        assert parse_date_flexible("1-2-24") == date(2024, 2, 1)
        assert parse_date_flexible("01.02.87") == date(1987, 2, 1)
        assert parse_date_flexible("5/6/49") == date(2049, 6, 5)
        assert parse_date_flexible("5/6/50") == date(1950, 6, 5)

    def test_rejects_garbage(self):
        assert parse_date_flexible("ontem") is None
        assert parse_date_flexible("1/2") is None
        assert parse_date_flexible("31-02-24") is None
        assert parse_date_flexible("") is None


def test_format_date():
    assert format_date(date(2024, 2, 1)) == "01/02/2024"
    assert format_date(None) == ""
