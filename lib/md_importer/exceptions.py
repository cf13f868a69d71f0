class ImporterError(Exception):
    """Base class for errors raised by the importer."""


class MalformedStatblockError(ImporterError, ValueError):
    """A required top-level field (name, ability score table) is missing."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Stat block could not be imported, missing: " + ", ".join(self.missing)
        )


class StoreError(ImporterError, RuntimeError):
    """The document store or compendium rejected a request."""
