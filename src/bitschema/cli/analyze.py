"""Record layout analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path

from ..codec.decoder import compile_model
from ..codec.plan import DecoderSpec, FieldPlan
from ..emit.python import render_unmarshaller
from ..models.base import BaseMessage


def load_messages(file_path: Path) -> list[type[BaseMessage]]:
    """Import a Python file and return the BaseMessage classes it defines."""
    spec = importlib.util.spec_from_file_location("user_module", file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["user_module"] = module
    spec.loader.exec_module(module)

    message_classes = []
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj is not BaseMessage and issubclass(obj, BaseMessage):
            # Only include classes defined in this file (not imported)
            if obj.__module__ == "user_module":
                message_classes.append(obj)
    return message_classes


def analyze_file(file_path: Path, byte_order: str | None = None, emit: bool = False) -> None:
    """Analyze all BaseMessage classes in a Python file.

    Args:
        file_path: Path to Python file containing record definitions
        byte_order: Byte order override ("big" or "little")
        emit: Also print the generated decode function of each record
    """
    message_classes = load_messages(file_path)

    if not message_classes:
        print(f"No BaseMessage classes found in {file_path}")
        return

    print("|" * 7, "bitschema: Packed Binary Record Decoder Compiler", "|" * 7)
    print(f"{len(message_classes)} record{'s' if len(message_classes) != 1 else ''} loaded.")
    print("Offsets are byte.bit, widths are in bits.")
    print()

    for msg_class in message_classes:
        spec = compile_model(msg_class, byte_order)
        print_layout(spec)
        if emit:
            print(render_unmarshaller(spec))


def describe_plan(plan: FieldPlan) -> str:
    """One-line summary of where a field is read from."""
    indices = plan.buffer_indices
    if len(indices) == 1:
        span = f"byte {indices[0]}"
    else:
        span = f"bytes {indices[0]}-{indices[-1]}"

    masked = [source for source in plan.sources if source.mask is not None]
    if plan.selector is not None:
        span += f" & 0x{plan.selector:02x}"
    elif masked:
        span += f" (first & 0x{masked[0].mask:02x})"
    return span


def print_layout(spec: DecoderSpec) -> None:
    """Print the field-by-field layout of one compiled record."""
    print(f"{'=' * 19} {spec.name} {'=' * 19}")

    total_bits = sum(plan.slot.effective_bits for plan in spec.fields)
    padding_bits = spec.min_buffer_bytes * 8 - total_bits
    size = spec.min_buffer_bytes
    print(f"Minimum buffer length: {size} bytes / {size * 8} bits")
    print(f"        body{'.' * 34}{total_bits}")
    if padding_bits > 0:
        print(f"        padding to full byte{'.' * 19}{padding_bits}")
    print(f"Byte order: {spec.byte_order.value}-endian")
    print()

    for i, plan in enumerate(spec.fields, 1):
        slot = plan.slot
        field_desc = f"{i}. {plan.name} ({plan.kind.value})"
        position = f"@{slot.byte_offset}.{slot.bit_offset}"
        bits = f"{slot.effective_bits}/{slot.field.declared_width} bits"
        dots = "." * max(1, 54 - len(field_desc) - len(position) - len(bits) - 1)
        print(f"        {field_desc}{dots}{position} {bits}  {describe_plan(plan)}")

    print()
