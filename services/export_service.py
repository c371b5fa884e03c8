"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of customers and the customer reports.
"""

import io
from typing import Optional

import pandas as pd

from repositories.customer_repo import CustomerRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_CUSTOMER_COLUMNS = ["ID", "First Name", "Last Name", "Country", "Postal Code", "Phone", "Email"]


class ExportService:
    """Generates downloadable customer reports in CSV and Excel formats."""

    def __init__(self, repo: Optional[CustomerRepository] = None):
        self.repo = repo or CustomerRepository()

    def export_customers_csv(self) -> io.BytesIO:
        """
        Export every customer as a CSV file.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._customers_frame()
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} customers as CSV")
        return buffer

    def export_reports_excel(self) -> io.BytesIO:
        """
        Export customers plus the country and top-spender reports as an
        Excel (.xlsx) workbook with one sheet each.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        customers = self._customers_frame()
        countries = pd.DataFrame(
            [{"Country": t.country, "Customers": t.customer_count}
             for t in self.repo.count_by_country()],
            columns=["Country", "Customers"],
        )
        # Totals are written as float; openpyxl has no Decimal cell type.
        spenders = pd.DataFrame(
            [{"ID": r.customer_id, "Customer": r.customer_name, "Total Spent": float(r.total_spent)}
             for r in self.repo.get_top_spenders()],
            columns=["ID", "Customer", "Total Spent"],
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            customers.to_excel(writer, sheet_name="Customers", index=False)
            countries.to_excel(writer, sheet_name="Countries", index=False)
            spenders.to_excel(writer, sheet_name="Top Spenders", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(customers)} customers and reports as Excel")
        return buffer

    def _customers_frame(self) -> pd.DataFrame:
        data = [
            {
                "ID": c.id,
                "First Name": c.first_name,
                "Last Name": c.last_name,
                "Country": c.country or "",
                "Postal Code": c.postal_code or "",
                "Phone": c.phone or "",
                "Email": c.email,
            }
            for c in self.repo.get_all()
        ]
        return pd.DataFrame(data, columns=_CUSTOMER_COLUMNS)
