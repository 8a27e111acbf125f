class ContentIndexError(Exception):
    pass


class IndexNotInitializedError(ContentIndexError):
    def __init__(self, index_path: str):
        self.index_path = index_path
        super().__init__(
            f"Index at '{index_path}' is not initialized. "
            "Call init() before appending records."
        )
