class GameError(Exception):
    """Recoverable error surfaced to the caller of a turn commit or roster build"""


class NotEnoughMana(GameError):
    def __init__(self, have: int, need: int):
        self.have = have
        self.need = need
        super().__init__(f"Not enough mana: have {have}, need {need}")


class InvalidBoardSlot(GameError):
    def __init__(self, slot: int):
        self.slot = slot
        super().__init__(f"Invalid board slot {slot}")


class InvalidHandIndex(GameError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Invalid hand index {index}")


class CardAlreadyUsed(GameError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Hand card {index} was already pitched or played this turn")


class InvalidBoardPitch(GameError):
    def __init__(self, slot: int):
        self.slot = slot
        super().__init__(f"Cannot pitch board slot {slot}: out of range or empty")


class BoardSlotOccupied(GameError):
    def __init__(self, slot: int):
        self.slot = slot
        super().__init__(f"Board slot {slot} is already occupied")


class TemplateNotFound(GameError):
    def __init__(self, card_id: int):
        self.card_id = card_id
        super().__init__(f"Card {card_id} not found in card pool")
