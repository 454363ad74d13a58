class FeedUnavailableError(RuntimeError):
    def __init__(self, reason: str = "Database not available") -> None:
        super().__init__(reason)
        self.reason = reason


class FeedResponseError(FeedUnavailableError):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Feed request failed with status {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
