from datetime import datetime, timedelta, timezone


def format_naira(amount: float) -> str:
    """
    Formats a currency amount for user-facing messages.
    Example: 500000 -> ₦500,000.00
    """
    return f"₦{amount:,.2f}"


def mask_email(email: str) -> str:
    """
    Masks an email address for audit logs.
    Example: adaeze@example.com -> ad***@example.com
    """
    if "@" not in email:
        return f"{email[:2]}***"
    user, domain = email.split("@", 1)
    return f"{user[:2]}***@{domain}"


def format_lagos_time(dt: datetime) -> str:
    """
    Converts UTC datetime to West Africa Time (UTC+1) and formats it.
    Format: DD/MM/YYYY at HH:mm
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    # Nigeria does not observe DST
    lagos_tz = timezone(timedelta(hours=1))
    dt_lagos = dt.astimezone(lagos_tz)

    return dt_lagos.strftime("%d/%m/%Y at %H:%M")
