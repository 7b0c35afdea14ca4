"""
storefront/services/receipts.py - PDF receipt for a paid transaction.

Fixed A4 layout: shop header, transaction details, one row per line item
(Item / Price / Quantity / Total), grand total and footer.
"""
from fpdf import FPDF

from storefront.schemas.transaction import Transaction
from storefront.services.pricing import line_total

MARGIN_LEFT = 10.0
LINE_HEIGHT = 10.0
TEXT_WIDTH = 190.0
COLUMN_WIDTH = 50.0
PAGE_BOTTOM = 277.0

# x offsets of the item table columns
COL_PRICE = 60.0
COL_QTY = 110.0
COL_TOTAL = 160.0


def _latin1(text: str) -> str:
    # core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


class ReceiptRenderer:
    def __init__(self, shop_name: str = "Book Shop", tin: str = "123456789",
                 payment_method: str = "Credit Card"):
        self.shop_name = shop_name
        self.tin = tin
        self.payment_method = payment_method

    def render(self, transaction: Transaction, customer_name: str) -> bytes:
        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.set_auto_page_break(auto=False)
        pdf.add_page()
        pdf.set_font("Helvetica", size=8)

        y = 20.0

        def draw(text: str, x: float = MARGIN_LEFT, width: float = TEXT_WIDTH):
            pdf.set_xy(x, y)
            pdf.cell(width, LINE_HEIGHT, _latin1(text), align="L")

        def advance(lines: int = 1) -> float:
            nonlocal y
            y += lines * LINE_HEIGHT
            if y > PAGE_BOTTOM:
                pdf.add_page()
                y = 20.0
            return y

        draw(f"TIN: {self.tin}")
        advance()
        draw("Welcome to our shop")

        created = transaction.created_at
        advance(2)
        draw(f"Project: {self.shop_name}")
        advance()
        draw(f"Transaction #: {transaction.id}")
        advance()
        draw(f"Date: {created.strftime('%Y-%m-%d')}")
        advance()
        draw(f"Time: {created.strftime('%H:%M:%S')}")
        advance()
        draw(f"Customer: {customer_name}")
        advance()
        draw(f"Payment Method: {self.payment_method}")

        advance(2)
        draw("Item", MARGIN_LEFT, COLUMN_WIDTH)
        draw("Price", MARGIN_LEFT + COL_PRICE, COLUMN_WIDTH)
        draw("Quantity", MARGIN_LEFT + COL_QTY, COLUMN_WIDTH)
        draw("Total", MARGIN_LEFT + COL_TOTAL, COLUMN_WIDTH)

        for item in transaction.items:
            advance()
            draw(item.product_id, MARGIN_LEFT, COLUMN_WIDTH)
            draw(f"${item.price:.2f}", MARGIN_LEFT + COL_PRICE, COLUMN_WIDTH)
            draw(f"{item.quantity}", MARGIN_LEFT + COL_QTY, COLUMN_WIDTH)
            draw(f"${line_total(item):.2f}", MARGIN_LEFT + COL_TOTAL, COLUMN_WIDTH)

        advance(2)
        draw(f"Grand Total: ${transaction.total_amount:.2f}")

        advance(2)
        draw("THANK YOU")
        advance()
        draw("COME BACK AGAIN")

        return bytes(pdf.output())
