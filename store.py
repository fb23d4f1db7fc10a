import threading
from typing import Callable, List
from uuid import uuid4

from errors import ReceiptNotFound
from models import Receipt


class ReceiptStore:
    """
    In-memory receipts keyed by generated id. Records live as long as the
    store does; there is no deletion and nothing is persisted.

    Flask serves requests on several threads, so every read and write of the
    mapping, and the compute-then-cache of a receipt's points, happen under
    one lock.
    """

    def __init__(self):
        self._receipts = {}  # dicts keep insertion order, which list() relies on
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._receipts)

    def insert(self, receipt: Receipt) -> str:
        """ Assigns a fresh id to the receipt, stores it and returns the id """
        receipt_id = str(uuid4())
        with self._lock:
            # uuid4 collisions are not expected, but an existing record is never replaced
            while receipt_id in self._receipts:
                receipt_id = str(uuid4())
            receipt.id = receipt_id
            self._receipts[receipt_id] = receipt
        return receipt_id

    def get(self, receipt_id: str) -> Receipt:
        with self._lock:
            return self._get(receipt_id)

    def list(self) -> List[Receipt]:
        with self._lock:
            return list(self._receipts.values())

    def points(self, receipt_id: str, calculate: Callable[[Receipt], int]) -> int:
        """
        Returns the cached points of a receipt, computing them with `calculate`
        the first time. If `calculate` raises, nothing is cached.
        """
        with self._lock:
            receipt = self._get(receipt_id)
            if receipt.points is None:
                receipt.points = calculate(receipt)
            return receipt.points

    def _get(self, receipt_id: str) -> Receipt:
        receipt = self._receipts.get(receipt_id)
        if receipt is None:
            raise ReceiptNotFound(f"Error: receipt id not found ({receipt_id})")
        return receipt
