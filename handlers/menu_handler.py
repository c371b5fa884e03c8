"""
handlers/menu_handler.py
-------------------------
Interactive console menu for the customer store.
Reads choices from stdin, validates input and delegates to the services.
"""

from pathlib import Path
from typing import Callable, Optional

from config import DEFAULT_PAGE_SIZE, EXPORT_DIR
from services.chart_service import ChartService
from services.customer_service import CustomerService
from services.export_service import ExportService
from repositories.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)

MENU_TEXT = """
Choose an operation:
1. List all customers
2. Find customer by ID
3. Find customer by name
4. Add new customer
5. Update customer
6. Customer count by country
7. Top spenders
8. Most popular genre for a customer
9. Get page of customers
10. Export customers and reports
11. Exit"""

EXIT_CHOICE = "11"


class MenuHandler:
    """
    Drives the menu loop.

    ``input_fn`` and ``output_fn`` default to the builtins and are
    swapped out in tests.
    """

    def __init__(
        self,
        customer_service: Optional[CustomerService] = None,
        export_service: Optional[ExportService] = None,
        chart_service: Optional[ChartService] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        export_dir: str = EXPORT_DIR,
    ):
        self.customers = customer_service or CustomerService()
        self.exports = export_service or ExportService()
        self.charts = chart_service or ChartService()
        self.read = input_fn
        self.write = output_fn
        self.export_dir = Path(export_dir)
        self.actions: dict[str, Callable[[], None]] = {
            "1": self.list_all,
            "2": self.find_by_id,
            "3": self.find_by_name,
            "4": self.add_customer,
            "5": self.update_customer,
            "6": self.count_by_country,
            "7": self.top_spenders,
            "8": self.most_popular_genre,
            "9": self.page_of_customers,
            "10": self.export_reports,
        }

    def run(self) -> None:
        """Loop until the user picks Exit or input ends."""
        while True:
            self.write(MENU_TEXT)
            try:
                choice = self.read("> ").strip()
            except EOFError:
                break
            if choice == EXIT_CHOICE:
                break
            action = self.actions.get(choice)
            if action is None:
                self.write("Invalid choice. Please try again.")
                continue
            try:
                action()
            except EOFError:
                break
            except StorageError as e:
                logger.error(f"Menu action {choice} failed: {e}")
                self.write(f"Database error: {e}")
        self.write("Goodbye!")

    # ── Lookups ───────────────────────────────────────────

    def list_all(self) -> None:
        self.write(self.customers.list_all())

    def find_by_id(self) -> None:
        customer_id = self._ask_int("Enter customer ID: ")
        if customer_id is not None:
            self.write(self.customers.find_by_id(customer_id))

    def find_by_name(self) -> None:
        fragment = self.read("Enter customer name: ").strip()
        self.write(self.customers.find_by_name(fragment))

    def page_of_customers(self) -> None:
        page_number = self._ask_int("Enter page number: ", positive=True)
        if page_number is None:
            return
        raw_size = self.read(f"Page size ({DEFAULT_PAGE_SIZE}): ").strip()
        if raw_size:
            page_size = _parse_positive(raw_size)
            if page_size is None:
                self.write("Invalid page size. Please enter a positive number.")
                return
        else:
            page_size = DEFAULT_PAGE_SIZE
        self.write(self.customers.page(page_number, page_size))

    # ── Writes ────────────────────────────────────────────

    def add_customer(self) -> None:
        first_name = self._ask_required("First Name (required): ", "First Name is required. Please enter a valid name.")
        last_name = self._ask_required("Last Name (required): ", "Last Name is required. Please enter a valid name.")
        email = self._ask_required("Email (required): ", "Email is required. Please enter a valid email address.")
        country = self.read("Country (optional): ")
        postal_code = self.read("Postal Code (optional): ")
        phone = self.read("Phone (optional): ")
        self.write(self.customers.add_customer(first_name, last_name, email, country, postal_code, phone))

    def update_customer(self) -> None:
        customer_id = self._ask_int("Enter customer ID to update: ")
        if customer_id is None:
            return
        existing = self.customers.get_customer(customer_id)
        if existing is None:
            self.write("Customer not found.")
            return
        self.write("Press Enter to keep the current value.")
        changes = {
            "first_name": self.read(f"New First Name ({existing.first_name}): "),
            "last_name": self.read(f"New Last Name ({existing.last_name}): "),
            "email": self.read(f"New Email ({existing.email}): "),
            "country": self.read(f"New Country ({existing.country or 'N/A'}): "),
            "postal_code": self.read(f"New Postal Code ({existing.postal_code or 'N/A'}): "),
            "phone": self.read(f"New Phone ({existing.phone or 'N/A'}): "),
        }
        self.write(self.customers.update_customer(customer_id, changes))

    # ── Reports ───────────────────────────────────────────

    def count_by_country(self) -> None:
        self.write(self.customers.country_summary())

    def top_spenders(self) -> None:
        self.write(self.customers.top_spenders_summary())

    def most_popular_genre(self) -> None:
        customer_id = self._ask_int("Enter customer ID: ")
        if customer_id is not None:
            self.write(self.customers.favourite_genre_summary(customer_id))

    def export_reports(self) -> None:
        outputs = [
            ("customers.csv", self.exports.export_customers_csv()),
            ("customer_reports.xlsx", self.exports.export_reports_excel()),
            ("countries.png", self.charts.country_bar()),
            ("top_spenders.png", self.charts.top_spenders_bar()),
        ]
        written = []
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            for name, buffer in outputs:
                if buffer is None:
                    continue
                path = self.export_dir / name
                path.write_bytes(buffer.getvalue())
                written.append(path)
        except OSError as e:
            logger.error(f"Export to {self.export_dir} failed: {e}")
            self.write(f"Export failed: {e}")
            return

        logger.info(f"Wrote {len(written)} export file(s) to {self.export_dir}")
        self.write("Exported:\n" + "\n".join(f"  {p}" for p in written))

    # ── Input helpers ─────────────────────────────────────

    def _ask_int(self, prompt: str, positive: bool = False) -> Optional[int]:
        raw = self.read(prompt).strip()
        value = _parse_positive(raw) if positive else _parse_int(raw)
        if value is None:
            kind = "a positive number" if positive else "a number"
            self.write(f"Invalid input. Please enter {kind}.")
        return value

    def _ask_required(self, prompt: str, error: str) -> str:
        while True:
            value = self.read(prompt).strip()
            if value:
                return value
            self.write(error)


def _parse_int(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_positive(raw: str) -> Optional[int]:
    value = _parse_int(raw)
    return value if value is not None and value > 0 else None
