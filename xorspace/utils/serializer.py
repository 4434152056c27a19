""" msgpack encoding for identifiers and the payloads that carry them """
from typing import Any, Callable, Dict, Type, TypeVar

import msgpack

from xorspace.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=type)


class MSGPackSerializer:
    """
    Packs builtin types with msgpack. Classes registered with :meth:`ext_serializable` are packed as
    msgpack ExtType via their ``packb(self) -> bytes`` / ``unpackb(cls, bytes)`` pair; tuples get their
    own ext code so they are not turned into lists on the way back.
    """

    TUPLE_EXT_TYPE_CODE = 0x40
    _type_to_code: Dict[type, int] = {}
    _code_to_type: Dict[int, type] = {}

    @classmethod
    def ext_serializable(cls, type_code: int) -> Callable[[T], T]:
        """Class decorator that registers a type under :type_code: (0..127, except the tuple code)"""
        if not isinstance(type_code, int) or not 0 <= type_code <= 127:
            raise ValueError(f"msgpack ext type code must be an int in [0, 127], got {type_code!r}")
        if type_code == cls.TUPLE_EXT_TYPE_CODE:
            raise ValueError(f"Type code {type_code} is reserved for tuples")

        def register(wrapped_type: T) -> T:
            if not all(callable(getattr(wrapped_type, method, None)) for method in ("packb", "unpackb")):
                raise TypeError(f"{wrapped_type.__name__} needs packb(self) -> bytes and unpackb(cls, raw)")
            previous = cls._code_to_type.get(type_code)
            if previous is not None and previous is not wrapped_type:
                logger.warning(f"ext type {type_code} was registered to {previous.__name__}, overwriting")
                cls._type_to_code.pop(previous, None)
            cls._code_to_type[type_code], cls._type_to_code[wrapped_type] = wrapped_type, type_code
            return wrapped_type

        return register

    @classmethod
    def registered_type(cls, type_code: int) -> Type:
        """:returns: the class registered under :type_code:, raises KeyError if there is none"""
        return cls._code_to_type[type_code]

    @classmethod
    def _pack_ext(cls, obj: Any) -> msgpack.ExtType:
        type_code = cls._type_to_code.get(type(obj))
        if type_code is not None:
            return msgpack.ExtType(type_code, obj.packb())
        if isinstance(obj, tuple):
            return msgpack.ExtType(cls.TUPLE_EXT_TYPE_CODE, cls.dumps(list(obj)))
        raise TypeError(f"{cls.__name__} cannot pack objects of type {type(obj).__name__}")

    @classmethod
    def _unpack_ext(cls, type_code: int, data: bytes) -> Any:
        if type_code == cls.TUPLE_EXT_TYPE_CODE:
            return tuple(cls.loads(data))
        if type_code in cls._code_to_type:
            return cls._code_to_type[type_code].unpackb(data)
        logger.warning(f"Unknown ExtType code: {type_code}, leaving it as is.")
        return data

    @classmethod
    def dumps(cls, obj: object) -> bytes:
        return msgpack.packb(obj, use_bin_type=True, strict_types=True, default=cls._pack_ext)

    @classmethod
    def loads(cls, buf: bytes) -> object:
        return msgpack.unpackb(buf, ext_hook=cls._unpack_ext, raw=False)
