from dataclasses import dataclass, field
from typing import List, Optional

from errors import MalformedInput

required_receipt_attributes = ["retailer", "total", "items", "purchaseDate", "purchaseTime"]
required_item_attributes = ["shortDescription", "price"]


@dataclass
class Item:
    short_description: str
    price: str

    def to_json(self) -> dict:
        return {"shortDescription": self.short_description, "price": self.price}


@dataclass
class Receipt:
    retailer: str
    purchase_date: str
    purchase_time: str
    total: str
    items: List[Item] = field(default_factory=list)
    id: Optional[str] = None
    points: Optional[int] = None  # None until the score has been computed

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "retailer": self.retailer,
            "purchaseDate": self.purchase_date,
            "purchaseTime": self.purchase_time,
            "items": [item.to_json() for item in self.items],
            "total": self.total,
            "points": self.points,
        }


def validate_receipt_json_structure(receipt):
    """
    Checks that the payload has every receipt attribute with the right type.
    Only the shape is checked here: whether total, prices, date and time
    actually parse is left to the points calculator.
    """
    if not isinstance(receipt, dict):
        raise MalformedInput("Error: receipt must be a JSON object")
    for attribute in required_receipt_attributes:
        if attribute not in receipt:  # check if attribute is missing
            raise MalformedInput(f"Error: missing {attribute} in receipt")
        if attribute != "items" and not isinstance(receipt[attribute], str):  # check attribute type
            raise MalformedInput(f"Error: invalid {attribute} format")

    if not isinstance(receipt["items"], list):
        raise MalformedInput("Error: invalid receipt items list format")
    if len(receipt["items"]) < 1:  # check if the items list is empty
        raise MalformedInput("Error: receipt items list is empty")
    for item in receipt["items"]:
        if not isinstance(item, dict):
            raise MalformedInput("Error: invalid receipt item format")
        for attribute in required_item_attributes:
            if not isinstance(item.get(attribute), str):
                raise MalformedInput("Error: invalid receipt item format")


def receipt_from_json(payload) -> Receipt:
    """ Validates the payload structure and builds an unsaved Receipt from it """
    validate_receipt_json_structure(payload)
    return Receipt(
        retailer=payload["retailer"],
        purchase_date=payload["purchaseDate"],
        purchase_time=payload["purchaseTime"],
        total=payload["total"],
        items=[Item(short_description=item["shortDescription"], price=item["price"])
               for item in payload["items"]],
    )
