from datetime import timezone as dt_tz

from django.utils import timezone


def to_local_iso(dt):
    if dt is None:
        return None
    return timezone.localtime(dt).isoformat()


def to_utc_iso(dt):
    if dt is None:
        return None
    return dt.astimezone(dt_tz.utc).isoformat()


def start_of_day(dt):
    """Midnight of ``dt``'s calendar day in the current time zone."""
    return timezone.localtime(dt).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt):
    """23:59:59.999 of ``dt``'s calendar day in the current time zone."""
    return timezone.localtime(dt).replace(hour=23, minute=59, second=59, microsecond=999000)


def day_key(dt=None):
    return timezone.localdate(dt or timezone.now()).isoformat()
