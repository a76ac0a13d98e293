# Filename: rutz/services/pdf.py
# Order receipt rendered with fpdf2; returned as bytes so the route can
# stream it without touching the filesystem.

from fpdf import FPDF

from rutz.schemas import OrderWithItems
from rutz.utils import latin1


class ReceiptPDF(FPDF):
    def header(self):
        self.set_font("helvetica", "B", 15)
        self.cell(80)
        self.cell(30, 10, "RUTZ Botanicals", border=1, align="C")
        self.ln(20)


def _line(pdf, text, height=8):
    pdf.multi_cell(0, height, latin1(text), new_x="LMARGIN", new_y="NEXT")


def generate_receipt_pdf(order: OrderWithItems) -> bytes:
    pdf = ReceiptPDF()
    pdf.add_page()
    pdf.set_font("helvetica", size=12)
    _line(pdf, f"Receipt for order {order.id}")
    _line(pdf, f"Date: {order.created_at:%Y-%m-%d %H:%M} UTC   Status: {order.status}")
    pdf.ln(4)

    for item in order.items:
        name = item.product.name if item.product else item.product_id
        _line(pdf, f"{item.quantity} x {name} @ ${item.price} = ${item.total}")

    pdf.ln(4)
    for label, amount in (("Subtotal", order.subtotal), ("Tax", order.tax),
                          ("Shipping", order.shipping), ("Total", order.total)):
        _line(pdf, f"{label}: ${amount}")
    return bytes(pdf.output())
