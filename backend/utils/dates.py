from datetime import date, datetime, time, timedelta
import pytz
import config


def _zone():
    return pytz.timezone(config.APP_TIMEZONE)


def today() -> date:
    return datetime.now(_zone()).date()


def start_of_day(day: date) -> datetime:
    """Midnight at the start of `day` in the business timezone."""
    return _zone().localize(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    """Last instant of `day` in the business timezone; used for as-of cutoffs."""
    return _zone().localize(datetime.combine(day, time.max))


def start_of_next_day(day: date) -> datetime:
    """Exclusive upper bound for an inclusive end-date filter."""
    return start_of_day(day + timedelta(days=1))
