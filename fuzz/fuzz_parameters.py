import sys

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from python_mimeparams.headers import get_boundary, get_file_name, parse_options_header
    from python_mimeparams.parameters import ParameterParser

parser = ParameterParser(lower_case_names=True)


def parse_single_separator(fdp: EnhancedDataProvider) -> None:
    parser.parse(fdp.ConsumeRandomString(), ";")


def parse_multiple_separators(fdp: EnhancedDataProvider) -> None:
    separators = fdp.ConsumeSeparators()
    parser.parse(fdp.ConsumeRandomString(), separators)


def parse_headers(fdp: EnhancedDataProvider) -> None:
    value = fdp.ConsumeRandomBytes()
    parse_options_header(value)
    get_boundary(value)
    get_file_name(value)


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    targets = [parse_single_separator, parse_multiple_separators, parse_headers]
    target = fdp.PickValueInList(targets)

    # Parameter parsing never raises for any input.
    target(fdp)


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
