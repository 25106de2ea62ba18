import io
import sys

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from python_mimeparams.decoders import QuotedPrintableDecoder, decode
    from python_mimeparams.exceptions import DecodeError


def fuzz_quoted_decode(fdp: EnhancedDataProvider) -> None:
    decode(fdp.ConsumeRandomBytes(), io.BytesIO())


def fuzz_quoted_decoder(fdp: EnhancedDataProvider) -> None:
    decoder = QuotedPrintableDecoder(io.BytesIO())
    while fdp.remaining_bytes():
        decoder.write(fdp.ConsumeRandomBytes())
    decoder.finalize()


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    targets = [fuzz_quoted_decode, fuzz_quoted_decoder]
    target = fdp.PickValueInList(targets)

    try:
        target(fdp)
    except DecodeError:
        return


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
