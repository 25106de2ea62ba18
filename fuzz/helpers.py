import atheris

SEPARATORS = [";", ",", "&", " "]


class EnhancedDataProvider(atheris.FuzzedDataProvider):
    def ConsumeRandomBytes(self) -> bytes:
        return self.ConsumeBytes(self.ConsumeIntInRange(0, self.remaining_bytes()))

    def ConsumeRandomString(self) -> str:
        return self.ConsumeUnicodeNoSurrogates(self.ConsumeIntInRange(0, self.remaining_bytes()))

    def ConsumeSeparators(self) -> list:
        count = self.ConsumeIntInRange(1, len(SEPARATORS))
        return [self.PickValueInList(SEPARATORS) for _ in range(count)]
