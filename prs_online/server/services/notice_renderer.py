"""
Upcoming review notice rendering.

Notices are rendered from a fixed HTML template. Every interpolated value is
HTML-escaped, so the output only depends on the practice review and firm.
"""

from __future__ import annotations

from datetime import date
from html import escape
from typing import Optional

from prs_online.core.database.entities import Firm, PracticeReview

NOTICE_TEMPLATE = """\
<div class="upcoming-review-notice">
  <p>{firm_name}</p>
  <p>Attention: {contact_name}</p>
  <h1>Notice of Upcoming Practice Review</h1>
  <p>Practice review number: <strong>{pr_number}</strong></p>
  <p>This is to inform you that a {review_type} practice review of your firm is tentatively scheduled to begin on {start_date}.</p>
{increased_risk}  <p>You will be contacted by the reviewer assigned to your firm to confirm the arrangements.</p>
</div>
"""

INCREASED_RISK_PARAGRAPH = (
    "  <p>Your firm has been identified as having an increased risk profile. "
    "The review will include additional procedures.</p>\n"
)


def format_long_date(value: date) -> str:
    """Format a date as e.g. ``March 7, 2027``."""
    return f"{value:%B} {value.day}, {value.year}"


def _text(value: Optional[str], default: str = "") -> str:
    return escape(value if value else default, quote=True)


def render_notice_html(practice_review: PracticeReview, firm: Firm) -> str:
    """Render the notice sent to a firm ahead of its practice review."""
    return NOTICE_TEMPLATE.format(
        firm_name=_text(firm.name),
        contact_name=_text(practice_review.contact_name, "Practice contact"),
        pr_number=_text(practice_review.pr_number),
        review_type=_text(practice_review.review_type).lower(),
        start_date=format_long_date(practice_review.start_date),
        increased_risk=INCREASED_RISK_PARAGRAPH if practice_review.has_increased_risk else "",
    )
