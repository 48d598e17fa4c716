"""
South African ID number validation.

Format (13 digits): YYMMDD SSSS C A Z
    YYMMDD  date of birth
    SSSS    sequence; 0000-4999 female, 5000-9999 male
    C       0 SA citizen, 1 permanent resident
    A       historically a race digit, now usually 8
    Z       Luhn check digit over the first 12 digits
"""

import re
from datetime import date
from typing import Optional

# ASCII digits only
ID_NUMBER_PATTERN = re.compile(r"[0-9]{13}")

CITIZENSHIP = {
    "0": "SA Citizen",
    "1": "Permanent Resident",
}


def _luhn_valid(number: str) -> bool:
    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def _birth_date(id_number: str, today: Optional[date] = None) -> Optional[date]:
    """Date of birth, choosing the century that keeps it in the past"""
    today = today or date.today()
    yy = int(id_number[0:2])
    mm = int(id_number[2:4])
    dd = int(id_number[4:6])

    year = 2000 + yy
    if year > today.year:
        year -= 100

    try:
        born = date(year, mm, dd)
    except ValueError:
        return None

    if born > today:
        try:
            born = date(year - 100, mm, dd)
        except ValueError:
            return None
    return born


def validate_sa_id_number(id_number: str, today: Optional[date] = None) -> bool:
    """True when id_number is a structurally valid 13 digit SA ID"""
    if id_number is None:
        return False
    id_number = id_number.strip()
    if not ID_NUMBER_PATTERN.fullmatch(id_number):
        return False
    if _birth_date(id_number, today) is None:
        return False
    if id_number[10] not in CITIZENSHIP:
        return False
    return _luhn_valid(id_number)


def extract_sa_id_info(id_number: str, today: Optional[date] = None) -> Optional[dict]:
    """
    Pull date of birth, gender and citizenship out of a valid ID number.

    Returns None for an invalid number.
    """
    if not validate_sa_id_number(id_number, today):
        return None
    id_number = id_number.strip()

    return {
        "date_of_birth": _birth_date(id_number, today),
        "gender": "female" if int(id_number[6:10]) < 5000 else "male",
        "citizenship": CITIZENSHIP[id_number[10]],
    }
