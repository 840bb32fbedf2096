"""Minimal HTML bodies for order, partner and sales notifications."""

from html import escape
from typing import Iterable


def wrap_html(title: str, body_html: str) -> str:
    """Wrap a fragment in a bare HTML document."""
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title></head>"
        "<body style=\"font-family: Arial, sans-serif; color: #222;\">"
        f"{body_html}"
        "</body></html>"
    )


def _items_table(items: Iterable) -> str:
    rows = "".join(
        f"<tr><td>{escape(i.product_name)} ({escape(i.size)})</td>"
        f"<td>{i.quantity}</td><td>KES {i.unit_price * i.quantity:,.2f}</td></tr>"
        for i in items
    )
    return (
        "<table cellpadding=\"6\" style=\"border-collapse: collapse;\">"
        "<tr><th align=\"left\">Item</th><th>Qty</th><th>Amount</th></tr>"
        f"{rows}</table>"
    )


def order_confirmation(order) -> tuple[str, str]:
    """Subject and HTML for the customer's order confirmation."""
    subject = f"Your Luna order {order.id[:8].upper()} is confirmed"
    body = (
        f"<h2>Thank you, {escape(order.customer_name)}!</h2>"
        "<p>We have received your payment and your order is being prepared.</p>"
        f"{_items_table(order.items)}"
        f"<p>Subtotal: KES {order.subtotal:,.2f}<br>"
        f"Delivery: KES {order.delivery_fee:,.2f}<br>"
        f"Platform fee: KES {order.platform_fee:,.2f}<br>"
        f"<strong>Total: KES {order.total_amount:,.2f}</strong></p>"
    )
    return subject, wrap_html(subject, body)


def new_order_notice(order) -> tuple[str, str]:
    """Subject and HTML for the admin/sales notice about a new order."""
    subject = f"New order {order.id[:8].upper()} from {order.customer_name}"
    body = (
        "<h2>New order received</h2>"
        f"<p>{escape(order.customer_name)} &lt;{escape(order.customer_email)}&gt;, "
        f"{escape(order.customer_phone)}<br>"
        f"Delivery: {escape(order.delivery_method)}, {escape(order.shipping_address)}</p>"
        f"{_items_table(order.items)}"
        f"<p><strong>Total: KES {order.total_amount:,.2f}</strong></p>"
    )
    return subject, wrap_html(subject, body)


def review_request(order, review_url: str) -> tuple[str, str]:
    """Subject and HTML asking the customer to review a delivered order."""
    subject = "How did we do? Review your Luna order"
    body = (
        f"<h2>Hi {escape(order.customer_name)},</h2>"
        "<p>Your order has been delivered. We would love to hear what you think.</p>"
        f"<p><a href=\"{escape(review_url)}\">Leave a review</a></p>"
    )
    return subject, wrap_html(subject, body)


def partner_application_notice(application) -> tuple[str, str]:
    """Subject and HTML telling admins a partner application awaits review."""
    subject = f"New Partner Application: {application.name}"
    body = (
        "<p>A new partnership application has been submitted and requires your review.</p>"
        "<h3>Applicant Details</h3><ul>"
        f"<li><strong>Name:</strong> {escape(application.name)}</li>"
        f"<li><strong>Email:</strong> {escape(application.email)}</li>"
        f"<li><strong>Phone:</strong> {escape(application.phone)}</li>"
        f"<li><strong>Partnership Type:</strong> {escape(application.partner_type.replace('-', ' '))}</li>"
        f"<li><strong>Message:</strong> {escape(application.message)}</li>"
        "</ul><p>Please visit the admin dashboard to approve or reject this application.</p>"
    )
    return subject, wrap_html(subject, body)


def partner_welcome(application) -> tuple[str, str]:
    subject = "Welcome to the Luna Essentials Partner Program!"
    body = (
        f"<p>Hello {escape(application.name)},</p>"
        "<p>Congratulations! Your application to become a "
        f"{escape(application.partner_type.replace('-', ' '))} has been approved.</p>"
        "<p>You can now sign in to the partner portal with this e-mail address to set up your account.</p>"
        "<p>We're excited to have you on board!</p>"
    )
    return subject, wrap_html(subject, body)


def sales_log_notice(salesperson_name: str, day, total_sold: int, lines: int) -> tuple[str, str]:
    """Subject and HTML summarising a salesperson's daily log for admins."""
    subject = f"Daily Sales Log Submitted by {salesperson_name}"
    body = (
        "<p>Hello Admins,</p>"
        f"<p><strong>{escape(salesperson_name)}</strong> has submitted their daily sales log "
        f"for {day:%d %B %Y}.</p>"
        "<h3>Summary</h3><ul>"
        f"<li><strong>Total Units Sold:</strong> {total_sold}</li>"
        f"<li><strong>Products logged:</strong> {lines}</li>"
        "</ul><p>Please review the detailed logs in the system.</p>"
    )
    return subject, wrap_html(subject, body)
