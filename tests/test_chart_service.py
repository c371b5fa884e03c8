"""
ChartService tests.
"""

from decimal import Decimal
from unittest.mock import MagicMock

from models.reports import CountryTally, SpenderRanking
from repositories.customer_repo import CustomerRepository
from services.chart_service import ChartService

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_country_bar_renders_png():
    repo = MagicMock(spec=CustomerRepository)
    repo.count_by_country.return_value = [CountryTally("USA", 13), CountryTally("Unknown", 1)]

    buf = ChartService(repo).country_bar()

    assert buf.getvalue().startswith(_PNG_MAGIC)


def test_country_bar_without_customers():
    repo = MagicMock(spec=CustomerRepository)
    repo.count_by_country.return_value = []
    assert ChartService(repo).country_bar() is None


def test_top_spenders_bar_passes_limit():
    repo = MagicMock(spec=CustomerRepository)
    repo.get_top_spenders.return_value = [
        SpenderRanking(6, "Helena Holý", Decimal("49.62")),
        SpenderRanking(26, "Richard Cunningham", Decimal("47.62")),
    ]

    buf = ChartService(repo).top_spenders_bar(limit=2)

    repo.get_top_spenders.assert_called_once_with(2)
    assert buf.getvalue().startswith(_PNG_MAGIC)


def test_top_spenders_bar_without_invoices():
    repo = MagicMock(spec=CustomerRepository)
    repo.get_top_spenders.return_value = []
    assert ChartService(repo).top_spenders_bar() is None
