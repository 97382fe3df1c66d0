"""Render DecoderSpecs as Python source.

The generated function checks the buffer length first and then assigns one
attribute per field in declaration order:

    def unmarshal_t5(record, data):
        if len(data) < 3:
            raise TruncatedError(3, len(data), 'T5')
        record.b1 = data[0]
        record.b2 = data[1]
        record.b3 = (data[2] & 0x80) != 0
        record.b4 = (data[2] & 0x40) != 0
        record.b5 = data[2] & 0x3f
        return record
"""

from __future__ import annotations

import keyword
import logging
import re
from typing import Any, Callable, Iterable, Optional

from ..codec.plan import ByteSource, DecoderSpec, FieldPlan, Reassembly
from ..exceptions import EmitError, TruncatedError

_logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def function_name(spec: DecoderSpec) -> str:
    """Default generated function name, e.g. ``unmarshal_protocol_header``."""
    return "unmarshal_" + _CAMEL_BOUNDARY.sub("_", spec.name).lower()


def _check_identifier(name: str, what: str) -> None:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise EmitError(f"{what} {name!r} is not a valid Python identifier")


def render_source(source: ByteSource) -> str:
    if source.index is None:
        return "0x00"
    if source.mask is None:
        return f"data[{source.index}]"
    return f"data[{source.index}] & 0x{source.mask:02x}"


def render_expression(plan: FieldPlan) -> str:
    """Render the expression producing one field's value."""
    if plan.reassembly is Reassembly.BIT_TEST:
        return f"(data[{plan.slot.byte_offset}] & 0x{plan.selector:02x}) != 0"
    if plan.reassembly is Reassembly.BYTE:
        return render_source(plan.sources[0])
    parts = ", ".join(render_source(source) for source in plan.sources)
    return f'int.from_bytes(bytes(({parts})), "{plan.byte_order.value}")'


def render_unmarshaller(spec: DecoderSpec, func_name: Optional[str] = None) -> str:
    """Render the decode function of one record type.

    Args:
        spec: Compiled decoder spec
        func_name: Name of the generated function, see function_name()

    Returns:
        Source text of a single function definition

    Raises:
        EmitError: If the function or a field name is not a valid identifier
    """
    name = func_name or function_name(spec)
    _check_identifier(name, "Function name")

    lines = [
        f"def {name}(record, data):",
        f"    if len(data) < {spec.min_buffer_bytes}:",
        f"        raise TruncatedError({spec.min_buffer_bytes}, len(data), {spec.name!r})",
    ]
    for plan in spec.fields:
        _check_identifier(plan.name, "Field name")
        lines.append(f"    record.{plan.name} = {render_expression(plan)}")
    lines.append("    return record")

    return "\n".join(lines) + "\n"


def render_module(specs: Iterable[DecoderSpec]) -> str:
    """Render a standalone module holding one decode function per spec."""
    chunks = [
        '"""Generated by bitschema. Do not edit."""',
        "",
        "from bitschema.exceptions import TruncatedError",
    ]
    for spec in specs:
        chunks.extend(["", "", render_unmarshaller(spec).rstrip("\n")])
    return "\n".join(chunks) + "\n"


def build_unmarshaller(
    spec: DecoderSpec, func_name: Optional[str] = None
) -> Callable[[Any, Any], Any]:
    """Render and compile the decode function of one record type.

    Example:
        >>> unmarshal_header = build_unmarshaller(compile_model(Header))
        >>> unmarshal_header(Header(), b"\\x02\\x80")
        Header(version=2, ack=True)
    """
    name = func_name or function_name(spec)
    source = render_unmarshaller(spec, name)
    namespace: dict[str, Any] = {"TruncatedError": TruncatedError}
    exec(compile(source, f"<bitschema:{spec.name}>", "exec"), namespace)
    _logger.debug("built %s for %s", name, spec.name)

    func = namespace[name]
    func.__doc__ = f"Decode a packed {spec.name} record into ``record``."
    return func
