"""Validation and date formatting helpers shared by the API and the resume template."""

import re
from datetime import date, datetime

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def _parse_date(value):
    """Accept "YYYY-MM", "YYYY-MM-DD", ISO datetimes, or date objects. None if unparseable."""
    if isinstance(value, (datetime, date)):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_year_month(year_month) -> str:
    """"2025-03" -> "Mar 2025". Empty string when missing or invalid."""
    if not year_month:
        return ""
    parsed = _parse_date(year_month)
    if parsed is None:
        return ""
    return parsed.strftime("%b %Y")


def format_full_date(value) -> str:
    """Any date -> "05 Mar 2025". An em dash when missing or invalid."""
    if not value:
        return "—"
    parsed = _parse_date(value)
    if parsed is None:
        return "—"
    return parsed.strftime("%d %b %Y")


def format_duration(start_date, end_date) -> str:
    """"Mar 2025 - Jun 2026", or "... - Present" when end is missing or "present"."""
    start = format_year_month(start_date)
    if not end_date or (isinstance(end_date, str) and end_date.lower() == "present"):
        end = "Present"
    else:
        end = format_year_month(end_date)
    separator = " - " if start and end else ""
    return f"{start}{separator}{end}"
