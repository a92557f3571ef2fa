from datetime import date, datetime


DEFAULT_AGE = 30
DOB_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y")


def parse_dob(value: date | datetime | str | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # ISO timestamps carry the date in their first ten characters.
    if len(text) > 10 and "T" in text:
        text = text[:10]
    for fmt in DOB_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def calculate_age(dob: date | datetime | str | None, reference: date | None = None) -> int:
    """Completed years between ``dob`` and ``reference`` (today by default).

    A missing or unparseable date of birth yields ``DEFAULT_AGE`` rather than an error.
    """
    born = parse_dob(dob)
    if born is None:
        return DEFAULT_AGE

    today = reference or date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return max(0, age)
