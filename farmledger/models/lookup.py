from farmledger.models.base import FarmDocument

DEFAULT_DESTINATION_COLOR = "#778873"


class Land(FarmDocument):
    name: str


class Plate(FarmDocument):
    name: str


class Destination(FarmDocument):
    name: str
    color: str = DEFAULT_DESTINATION_COLOR
