import re
from typing import List

from errors import UnscoreableReceipt
from models import Item, Receipt

POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEMS_COUNT = 5
POINTS_VALID_PURCHASE_HOUR = 10
POINTS_ODD_PURCHASE_DAY = 6
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
REWARD_HOUR_START = 14
REWARD_HOUR_END = 16
CENTS_PER_DOLLAR = 100
CENTS_PER_QUARTER = 25
CENTS_PER_DESCRIPTION_POINT = 500  # price * 0.2, in cents

AMOUNT_PATTERN = re.compile(r"([0-9]+)(?:\.([0-9]{1,2}))?")
TWO_DIGITS_PATTERN = re.compile(r"[0-9]{2}")


def parse_amount(value: str, name: str) -> int:
    """ Parses a non-negative money amount with at most two decimal places into cents """
    match = AMOUNT_PATTERN.fullmatch(value)
    if not match:
        raise UnscoreableReceipt(f"Error: invalid {name} ({value})")
    dollars, cents = match.groups()
    try:
        return int(dollars + (cents or "").ljust(2, "0"))
    except ValueError:
        # more digits than int() will convert
        raise UnscoreableReceipt(f"Error: invalid {name} ({value})")


def parse_purchase_hour(time: str) -> int:
    """ Reads the hour from the first two characters of an HH:MM time """
    hour = time[0:2]
    if not TWO_DIGITS_PATTERN.fullmatch(hour):
        raise UnscoreableReceipt(f"Error: invalid receipt purchase time ({time})")
    return int(hour)


def parse_purchase_day(date: str) -> int:
    """ Reads the day of month from characters 8-9 of a YYYY-MM-DD date """
    day = date[8:10]
    if not TWO_DIGITS_PATTERN.fullmatch(day):
        raise UnscoreableReceipt(f"Error: invalid receipt purchase date ({date})")
    return int(day)


def score_retailer(retailer_name: str) -> int:
    """ One point per letter or digit in the retailer name """
    return sum(POINTS_RETAILER_NAME_ALPHANUM_CHARACTER
               for c in retailer_name if c.isalpha() or c.isdecimal())


def score_round_total(total_cents: int) -> int:
    """ Points for a total with no cents """
    return POINTS_TOTAL_HAS_NO_CENTS if total_cents % CENTS_PER_DOLLAR == 0 else 0


def score_quarter_total(total_cents: int) -> int:
    """ Points for a total that is a multiple of 0.25 """
    return POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS if total_cents % CENTS_PER_QUARTER == 0 else 0


def score_item_pairs(items: List[Item]) -> int:
    """ Points for every two items on the receipt """
    return (len(items) // 2) * POINTS_ITEMS_COUNT


def score_item_descriptions(items: List[Item]) -> int:
    """
    Every price is parsed, in item order, even for items whose description
    earns nothing, so a bad price is always reported.
    An all-whitespace description trims to length 0 and still qualifies.
    """
    points = 0
    for item in items:
        price_cents = parse_amount(item.price, "item price")
        if len(item.short_description.strip()) % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR == 0:
            points += -(-price_cents // CENTS_PER_DESCRIPTION_POINT)  # ceil(price * 0.2)
    return points


def score_purchase_time(hour: int) -> int:
    """ Points for a purchase between 14:00 and 16:00 """
    return POINTS_VALID_PURCHASE_HOUR if REWARD_HOUR_START <= hour < REWARD_HOUR_END else 0


def score_purchase_date(day: int) -> int:
    """ Points for a purchase on an odd day of the month """
    return POINTS_ODD_PURCHASE_DAY if day % 2 == 1 else 0


def calculate_points(receipt: Receipt) -> int:
    """
    Calculates points earned from each component of the receipt.

    Raises UnscoreableReceipt for the first field that does not parse, checked
    in the order total, item prices, purchase time, purchase date. Every item
    price is checked, including items whose description earns no points.
    Nothing is written to the receipt.
    """
    points = score_retailer(receipt.retailer)
    total_cents = parse_amount(receipt.total, "receipt total")
    points += score_round_total(total_cents)
    points += score_quarter_total(total_cents)
    points += score_item_pairs(receipt.items)
    points += score_item_descriptions(receipt.items)
    points += score_purchase_time(parse_purchase_hour(receipt.purchase_time))
    points += score_purchase_date(parse_purchase_day(receipt.purchase_date))
    return points
