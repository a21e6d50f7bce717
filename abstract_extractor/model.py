from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ClassHeader:
    name: str
    extends: Optional[str] = None         # raw type text (e.g. Base<T>)
    implements: Tuple[str, ...] = ()
    mixins: Tuple[str, ...] = ()          # the `with` clause
    type_parameters: str = ""             # e.g. "<T extends Object>"
    offset: int = 0                       # char offset of the `class` keyword


@dataclass(frozen=True)
class FieldDescriptor:
    type: str                             # raw type text (e.g. List<Item>?)
    name: str


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    return_type: str                      # raw type text, "" when omitted
    params: str                           # raw "( ... )" text, "" for getters
    body: str                             # verbatim "=> expr;" or "{ ... }"
    is_getter: bool = False
    is_setter: bool = False
    is_static: bool = False
    is_async: bool = False
    type_parameters: str = ""             # generic method params, e.g. "<T>"
    body_marker: str = ""                 # async / async* / sync*

    @property
    def is_plain_method(self) -> bool:
        return not (self.is_getter or self.is_setter)


@dataclass
class ParsedClass:
    header: ClassHeader
    fields: Tuple[FieldDescriptor, ...] = ()
    methods: Tuple[MethodDescriptor, ...] = ()

    @property
    def name(self) -> str:
        return self.header.name


@dataclass(frozen=True)
class ConversionResult:
    interface_text: str
    concrete_text: str

    @property
    def full_output(self) -> str:
        """Both classes joined the way the editor inserts them."""
        return f"{self.interface_text}\n\n{self.concrete_text}"


@dataclass
class ActionResult:
    document: str
    clipboard: Optional[str] = None
    changed: bool = False
