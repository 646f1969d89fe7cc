class GolfCoreError(Exception):
    pass


class SettlementImbalanceError(GolfCoreError):

    def __init__(self, detail: str, total_cents: int = 0):
        self.total_cents = total_cents
        self.detail = detail
        super().__init__(detail)
