class ReceiptError(Exception):
    """ Base class for errors that are reported back to the client """
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedInput(ReceiptError):
    """ The submitted payload does not have the shape of a receipt """
    status_code = 400


class ReceiptNotFound(ReceiptError):
    """ No receipt is stored under the requested id """
    status_code = 404


class UnscoreableReceipt(ReceiptError):
    """ A stored receipt has a field the scoring rules cannot parse """
    status_code = 400
