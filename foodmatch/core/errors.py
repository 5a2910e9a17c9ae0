class InvalidArgument(ValueError):
    """
    Raised when a ranking call cannot run at all: an unknown strategy or a
    malformed recipient coordinate. Never raised for a single bad donation row.
    """

    def __init__(self, detail: str, field: str = ""):
        super().__init__(detail)
        self.detail = detail
        self.field = field
