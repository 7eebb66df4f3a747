from typing import Union, get_args

Data = Union[bytes, bytearray, memoryview]

_URL_SCHEMES = ('http://', 'https://')


def as_data(data: Data) -> bytes:
    """
    Makes sure the given argument is some kind of byte buffer and returns it as immutable bytes.

    :raises TypeError: if data is not bytes, a bytearray or a memoryview.
    """
    if not isinstance(data, get_args(Data)):
        types = " or ".join(t.__name__ for t in get_args(Data))
        raise TypeError("Expected {}, not {}".format(types, type(data).__name__))
    if not isinstance(data, bytes):
        data = bytes(data)
    return data


def is_url(location) -> bool:
    return isinstance(location, str) and location.startswith(_URL_SCHEMES)
