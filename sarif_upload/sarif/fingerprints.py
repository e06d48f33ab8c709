from abc import ABC, abstractmethod


class BaseFingerprinter(ABC):
    """Contract for adding stable per-result fingerprints to a SARIF log."""

    @abstractmethod
    def add_fingerprints(self, serialized_sarif: str) -> str:
        """Return the serialized document with fingerprints attached.

        Must be a pure function of its input.
        """


class PassthroughFingerprinter(BaseFingerprinter):
    """Leaves the document untouched.

    Results that already carry fingerprints from the analysis tool are
    uploaded as they are.
    """

    def add_fingerprints(self, serialized_sarif: str) -> str:
        return serialized_sarif


class FingerprinterFactory:
    """Creates the configured fingerprinter."""

    ADAPTERS: dict[str, type[BaseFingerprinter]] = {
        "passthrough": PassthroughFingerprinter,
    }

    @classmethod
    def create(cls, name: str) -> BaseFingerprinter:
        adapter_cls = cls.ADAPTERS.get(name.lower())
        if adapter_cls is None:
            raise ValueError(
                f"Unknown fingerprinter '{name}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
